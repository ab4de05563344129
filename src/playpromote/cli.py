import logging
import os

import click
from rich.logging import RichHandler

from .core import Promoter
from .errors import PromoterError
from .services.config_loader import ConfigLoader
from .services.ci import emit_error_annotation
from .services.credentials import DEFAULT_CREDENTIALS_FILE
from .services.inputs import build_config


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None and cli_value != "":
        return cli_value
    if key in config:
        return config[key]
    return default


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--package-name",
    envvar="INPUT_PACKAGE-NAME",
    required=False,
    help="Application package name, e.g. com.example.app.",
)
@click.option(
    "--service-account-json-raw",
    envvar="INPUT_SERVICE-ACCOUNT-JSON-RAW",
    required=False,
    help="Raw JSON of the service account key used to call the publisher API.",
)
@click.option("--from-track", envvar="INPUT_FROM-TRACK", required=False, help="Track to promote from, e.g. beta.")
@click.option("--to-track", envvar="INPUT_TO-TRACK", required=False, help="Track to promote to, e.g. production.")
@click.option(
    "--user-fraction",
    envvar="INPUT_USER-FRACTION",
    required=False,
    help="Staged rollout fraction to apply to every promoted release (0.0-1.0).",
)
@click.option(
    "--inapp-update-priority",
    envvar="INPUT_INAPP-UPDATE-PRIORITY",
    required=False,
    help="In-app update priority to apply to every promoted release (0-5).",
)
@click.option(
    "--credentials-file",
    required=False,
    type=click.Path(),
    help=f"Where the credentials are staged during the run (default: {DEFAULT_CREDENTIALS_FILE}).",
)
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help="Path to a YAML configuration file. Defaults to .playpromote.yml if present.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=None,
    help="Read the source track and print the planned releases, then discard the edit.",
)
@click.option(
    "--changes-not-sent-for-review",
    is_flag=True,
    default=None,
    help="Commit without automatically sending the changes for review.",
)
@click.option("--verbose", is_flag=True, default=None, help="Enable verbose logging")
@click.option("--log-file", type=click.Path(), help="Path to log file")
def main(
    package_name,
    service_account_json_raw,
    from_track,
    to_track,
    user_fraction,
    inapp_update_priority,
    credentials_file,
    config,
    dry_run,
    changes_not_sent_for_review,
    verbose,
    log_file,
):
    """Promote a Google Play release from one track to another."""
    logger = logging.getLogger("playpromote")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), ".playpromote.yml")
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except PromoterError as exc:
        raise click.ClickException(str(exc)) from exc

    package_name = _resolve_option(package_name, config_values, "package_name")
    service_account_json_raw = _resolve_option(
        service_account_json_raw, config_values, "service_account_json_raw"
    )
    from_track = _resolve_option(from_track, config_values, "from_track")
    to_track = _resolve_option(to_track, config_values, "to_track")
    user_fraction = _resolve_option(user_fraction, config_values, "user_fraction")
    inapp_update_priority = _resolve_option(
        inapp_update_priority, config_values, "inapp_update_priority"
    )
    credentials_file = _resolve_option(
        credentials_file, config_values, "credentials_file", default=DEFAULT_CREDENTIALS_FILE
    )
    dry_run = bool(_resolve_option(dry_run, config_values, "dry_run", default=False))
    changes_not_sent_for_review = bool(
        _resolve_option(
            changes_not_sent_for_review,
            config_values,
            "changes_not_sent_for_review",
            default=False,
        )
    )
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        promotion_config = build_config(
            package_name=package_name,
            service_account_json_raw=service_account_json_raw,
            from_track=from_track,
            to_track=to_track,
            user_fraction=user_fraction,
            update_priority=inapp_update_priority,
        )
        promoter = Promoter(
            config=promotion_config,
            credentials_file=credentials_file,
            dry_run=dry_run,
            changes_not_sent_for_review=changes_not_sent_for_review,
        )
    except PromoterError as exc:
        emit_error_annotation(str(exc))
        raise click.ClickException(str(exc)) from exc

    raise SystemExit(promoter.run())


if __name__ == "__main__":
    main()
