import logging
from typing import Any, Callable, Dict, List, Optional

from rich.console import Console

from .errors import ConfigurationError, PromoterError
from .errors_catalog import actionable_error
from .models import EditTransaction, PromotionConfig, PromotionResult, PromotionState
from .services.auth import build_authorized_session
from .services.ci import emit_error_annotation
from .services.credentials import DEFAULT_CREDENTIALS_FILE, CredentialStager
from .services.inputs import REQUIRED_INPUTS
from .services.publisher import PublisherClient
from .services.releases import apply_rollout, build_release_table

console = Console()
logger = logging.getLogger("playpromote")


class Promoter:
    """Promotes the releases of one track onto another inside a single edit."""

    def __init__(
        self,
        config: PromotionConfig,
        credentials_file: str = DEFAULT_CREDENTIALS_FILE,
        dry_run: bool = False,
        changes_not_sent_for_review: bool = False,
        session_factory: Callable[[], Any] = build_authorized_session,
        environ=None,
    ):
        self.config = config
        self.dry_run = dry_run
        self.changes_not_sent_for_review = changes_not_sent_for_review
        self.session_factory = session_factory

        self.state = PromotionState.UNAUTHENTICATED
        self.current_step_name: Optional[str] = None
        self.publisher: Optional[PublisherClient] = None

        self.credential_stager = CredentialStager(
            logger=logger,
            console=console,
            credentials_file=credentials_file,
            environ=environ,
        )

    def _transition(self, new_state: PromotionState):
        logger.debug("State: %s -> %s", self.state.value, new_state.value)
        self.state = new_state

    def _run_step(self, name: str, callback, *args, next_state: Optional[PromotionState] = None, **kwargs):
        self.current_step_name = name
        logger.debug("Running step: %s", name)
        result = callback(*args, **kwargs)
        if next_state is not None:
            self._transition(next_state)
        self.current_step_name = None
        return result

    def validate_config(self):
        for input_name, key in REQUIRED_INPUTS:
            value = getattr(self.config, key, None)
            if value is None or not str(value).strip():
                raise ConfigurationError(actionable_error("missing_input", name=input_name, key=key))

    def authenticate(self):
        logger.debug("Creating auth client")
        self.publisher = PublisherClient(session=self.session_factory(), logger=logger)

    def open_edit(self) -> EditTransaction:
        console.print("[blue]Creating a new edit...[/blue]")
        logger.info("Creating a new edit for %s", self.config.package_name)
        return self.publisher.insert_edit(self.config.package_name)

    def read_source_track(self, edit: EditTransaction) -> List[Dict[str, Any]]:
        logger.info("Reading releases from track '%s'", self.config.from_track)
        track = self.publisher.get_track(edit, self.config.from_track)
        releases = track.get("releases") or []
        if not releases:
            logger.warning("Track '%s' has no releases to promote.", self.config.from_track)
        return releases

    def build_destination_releases(self, releases: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        promoted = apply_rollout(
            releases,
            user_fraction=self.config.user_fraction,
            update_priority=self.config.update_priority,
        )
        console.print(build_release_table(self.config.to_track, promoted))
        return promoted

    def stage_destination_track(self, edit: EditTransaction, releases: List[Dict[str, Any]]):
        console.print(
            f"[blue]Switching {self.config.from_track} release to {self.config.to_track}...[/blue]"
        )
        logger.info("Writing %s release(s) to track '%s'", len(releases), self.config.to_track)
        self.publisher.update_track(edit, self.config.to_track, releases)

    def commit(self, edit: EditTransaction) -> str:
        console.print("[blue]Committing changes...[/blue]")
        logger.info("Committing edit %s", edit.edit_id)
        return self.publisher.commit_edit(
            edit,
            changes_not_sent_for_review=self.changes_not_sent_for_review,
        )

    def abandon_edit(self, edit: EditTransaction):
        logger.info("Dry run: discarding edit %s", edit.edit_id)
        self.publisher.delete_edit(edit)

    def promote(self) -> PromotionResult:
        self.state = PromotionState.UNAUTHENTICATED
        try:
            self._run_step("validate_config", self.validate_config)
            with self.credential_stager.stage(self.config.service_account_json_raw):
                return self._promote_with_credentials()
        except BaseException:
            self._transition(PromotionState.FAILED)
            raise

    def _promote_with_credentials(self) -> PromotionResult:
        self._run_step("authenticate", self.authenticate)
        edit = self._run_step("open_edit", self.open_edit, next_state=PromotionState.EDIT_OPEN)
        source_releases = self._run_step(
            "read_source_track",
            self.read_source_track,
            edit,
            next_state=PromotionState.SOURCE_READ,
        )
        releases = self._run_step("build_destination_releases", self.build_destination_releases, source_releases)

        if self.dry_run:
            self._run_step("abandon_edit", self.abandon_edit, edit)
            return self._result(edit, releases, commit_id=None)

        self._run_step(
            "stage_destination_track",
            self.stage_destination_track,
            edit,
            releases,
            next_state=PromotionState.DESTINATION_STAGED,
        )
        commit_id = self._run_step("commit", self.commit, edit, next_state=PromotionState.COMMITTED)
        return self._result(edit, releases, commit_id=commit_id)

    def _result(self, edit: EditTransaction, releases, commit_id: Optional[str]) -> PromotionResult:
        return PromotionResult(
            package_name=self.config.package_name,
            from_track=self.config.from_track,
            to_track=self.config.to_track,
            edit_id=edit.edit_id,
            commit_id=commit_id,
            releases=releases,
            dry_run=self.dry_run,
        )

    def _fail(self, message: str):
        failed_step = self.current_step_name or "run"
        logger.debug("Failed during step: %s", failed_step)
        emit_error_annotation(message)

    def run(self) -> int:
        try:
            logger.info("Starting playpromote...")
            result = self.promote()
        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            self._fail("Operation cancelled by user.")
            return 1
        except PromoterError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            logger.error(str(exc))
            self._fail(str(exc))
            return 1
        except Exception as exc:
            console.print(f"[bold red]Unexpected error:[/bold red] {exc}")
            logger.exception("Unexpected error")
            self._fail(str(exc))
            return 1

        if result.dry_run:
            console.print(
                f"[yellow]Dry run complete. Edit {result.edit_id} was discarded; "
                f"track '{result.to_track}' is unchanged.[/yellow]"
            )
            return 0

        console.print(f"[green]Successfully promoted release to {result.to_track}[/green]")
        logger.info("Committed edit %s", result.commit_id)
        return 0
