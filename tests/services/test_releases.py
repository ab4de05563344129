from rich.console import Console

from playpromote.services.releases import apply_rollout, build_release_table


def test_apply_rollout_overwrites_supplied_values_only():
    releases = [
        {"versionCodes": ["10"], "status": "inProgress", "userFraction": 0.1, "inAppUpdatePriority": 4},
        {"versionCodes": ["11"], "status": "draft"},
    ]

    promoted = apply_rollout(releases, user_fraction=0.25)

    assert promoted == [
        {"versionCodes": ["10"], "status": "inProgress", "userFraction": 0.25, "inAppUpdatePriority": 4},
        {"versionCodes": ["11"], "status": "draft", "userFraction": 0.25},
    ]


def test_apply_rollout_treats_zero_as_supplied():
    promoted = apply_rollout([{"inAppUpdatePriority": 5, "userFraction": 0.3}], user_fraction=0.0, update_priority=0)

    assert promoted == [{"inAppUpdatePriority": 0, "userFraction": 0.0}]


def test_apply_rollout_does_not_mutate_source_releases():
    releases = [{"versionCodes": ["10"], "releaseNotes": [{"language": "en-US", "text": "Fixes"}]}]

    promoted = apply_rollout(releases, update_priority=3)
    promoted[0]["releaseNotes"][0]["text"] = "changed"

    assert releases == [{"versionCodes": ["10"], "releaseNotes": [{"language": "en-US", "text": "Fixes"}]}]


def test_build_release_table_renders_release_rows():
    console = Console(record=True, width=160)
    table = build_release_table(
        "production",
        [{"name": "2.0.1", "versionCodes": ["201", "202"], "status": "inProgress", "userFraction": 0.5}],
    )

    console.print(table)
    output = console.export_text()

    assert "Releases for track 'production'" in output
    assert "201, 202" in output
    assert "0.5" in output
