import pytest
from typer.testing import CliRunner

from conftest import StubCatalogClient
from hivefinder.cli import cli
from hivefinder.cli.commands import hive
from hivefinder.cli.common.context import FinderAppContext, build_properties
from hivefinder.core.events import CollectingEventSubmitter
from hivefinder.core.finder import HiveDatasetFinder
from hivefinder.core.pool import MetastoreClientPool

runner = CliRunner()

CATALOG = {"sales": ["orders_2020", "orders_2021", "customers"], "hr": ["people"]}


@pytest.fixture
def use_catalog(monkeypatch):
    def _use(client, properties):
        def _build(profile, properties_file, overrides):
            events = CollectingEventSubmitter()
            finder = HiveDatasetFinder(
                None,
                properties,
                client_pool=MetastoreClientPool(lambda: client),
                event_submitter=events,
            )
            return FinderAppContext(
                profile=profile, properties=properties, finder=finder, events=events
            )

        monkeypatch.setattr(hive, "build_finder_context", _build)
        monkeypatch.setattr(hive, "setup_logging", lambda verbose=False: None)

    return _use


def test_tables_lists_accepted_tables(use_catalog):
    use_catalog(
        StubCatalogClient(CATALOG),
        {"hive.dataset.database": "sales", "hive.dataset.table.pattern": "orders_*"},
    )

    result = runner.invoke(cli.app, ["hive", "tables"])

    assert result.exit_code == 0
    assert "orders_2020" in result.output
    assert "orders_2021" in result.output
    assert "customers" not in result.output


def test_tables_exits_nonzero_when_listing_fails(use_catalog):
    use_catalog(
        StubCatalogClient(CATALOG, fail_listing=True), {"hive.dataset.whitelist": "*"}
    )

    result = runner.invoke(cli.app, ["hive", "tables"])

    assert result.exit_code == 1
    assert "metastore unreachable" in result.output


def test_datasets_reports_failures(use_catalog):
    use_catalog(
        StubCatalogClient(CATALOG, broken_tables={"sales.customers"}),
        {"hive.dataset.whitelist": "sales"},
    )

    result = runner.invoke(cli.app, ["hive", "datasets"])

    assert result.exit_code == 1
    assert "sales.orders_2020" in result.output
    assert "Failed to create 1 dataset(s)." in result.output


def test_datasets_succeeds_without_failures(use_catalog):
    use_catalog(StubCatalogClient(CATALOG), {"hive.dataset.whitelist": "hr"})

    result = runner.invoke(cli.app, ["hive", "datasets"])

    assert result.exit_code == 0
    assert "hr.people" in result.output
    assert "Discovered 1 dataset(s)." in result.output


def test_table_names_with_brackets_are_printed_literally(use_catalog):
    use_catalog(
        StubCatalogClient({"raw": ["t[old]"]}), {"hive.dataset.whitelist": "raw"}
    )

    tables_result = runner.invoke(cli.app, ["hive", "tables"])
    datasets_result = runner.invoke(cli.app, ["hive", "datasets"])

    assert tables_result.exit_code == 0
    assert "t[old]" in tables_result.output
    assert datasets_result.exit_code == 0
    assert "raw.t[old]" in datasets_result.output


def test_config_shows_resolved_config(use_catalog):
    use_catalog(
        StubCatalogClient(CATALOG),
        {
            "hive.dataset.whitelist": "sales",
            "hive.dataset.configPrefix": "copy",
            "copy.target": "s3://backup",
        },
    )

    result = runner.invoke(cli.app, ["hive", "config", "sales.orders_2020"])

    assert result.exit_code == 0
    assert "target" in result.output
    assert "s3://backup" in result.output


def test_config_rejects_malformed_table(use_catalog):
    use_catalog(StubCatalogClient(CATALOG), {"hive.dataset.whitelist": "sales"})

    result = runner.invoke(cli.app, ["hive", "config", "orders"])

    assert result.exit_code == 2


def test_missing_selection_keys_exit_with_usage_error(monkeypatch):
    monkeypatch.setattr(hive, "setup_logging", lambda verbose=False: None)

    result = runner.invoke(cli.app, ["hive", "tables"])

    assert result.exit_code == 2
    assert "Must specify" in result.output


def test_build_properties_applies_overrides_and_profile(tmp_path):
    path = tmp_path / "job.properties"
    path.write_text("hive.dataset.database=sales\nowner=a\n", encoding="utf-8")

    props = build_properties(path, ["owner=b"], profile="dev")

    assert props == {
        "hive.dataset.database": "sales",
        "owner": "b",
        "databricks.profile": "dev",
    }
