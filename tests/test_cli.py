"""Tests for the command line entry point"""

from unittest.mock import patch

import pytest

from dynastybracket.__main__ import DEMO_GROUP, main
from dynastybracket.api.appwrite_api import AppwriteAPI
from dynastybracket.api.memory_store import InMemoryStore


def run_main(args: list[str], env: dict[str, str] | None = None):
    """Run main() with the app class mocked; returns the mock class"""
    with patch("sys.argv", ["dynastybracket"] + args), patch.dict(
        "os.environ", env or {}, clear=True
    ), patch("dynastybracket.__main__.BracketDisplay") as mock_app_class, patch(
        "dynastybracket.__main__.cleanup_terminal"
    ) as mock_cleanup:
        mock_app_class.return_value.run.return_value = None

        main()

        mock_cleanup.assert_called_once()
        return mock_app_class


@pytest.mark.integration
class TestDemoMode:
    """Test demo mode selection"""

    def test_demo_flag_uses_mock_data(self):
        """Test that --demo ignores any connection settings"""
        mock_app_class = run_main(["--demo", "--project", "p", "--database", "d"])

        orchestrator, group_id = mock_app_class.call_args.args
        assert isinstance(orchestrator.store, InMemoryStore)
        assert group_id == DEMO_GROUP

    def test_no_credentials_falls_back_to_demo(self):
        """Test that missing project and database enable demo mode"""
        mock_app_class = run_main([])

        orchestrator, _ = mock_app_class.call_args.args
        assert isinstance(orchestrator.store, InMemoryStore)

    def test_demo_group_can_be_chosen(self):
        mock_app_class = run_main(["--demo", "--group", "brazil"])

        assert mock_app_class.call_args.args[1] == "brazil"

    def test_immediate_flag(self):
        mock_app_class = run_main(["--demo", "--immediate"])

        orchestrator, _ = mock_app_class.call_args.args
        assert orchestrator.immediate_schedule is True


@pytest.mark.integration
class TestAppwriteMode:
    """Test hosted store selection"""

    def test_flags_build_appwrite_client(self):
        mock_app_class = run_main(
            ["--project", "proj-1", "--database", "db-1", "--api-key", "key", "--group", "japan"]
        )

        orchestrator, group_id = mock_app_class.call_args.args
        assert isinstance(orchestrator.store, AppwriteAPI)
        assert orchestrator.store.settings.project_id == "proj-1"
        assert orchestrator.store.settings.api_key == "key"
        assert group_id == "japan"
        assert orchestrator.immediate_schedule is False

    def test_environment_defaults(self):
        """Test that APPWRITE_* variables fill in connection flags"""
        env = {
            "APPWRITE_ENDPOINT": "https://appwrite.example/v1",
            "APPWRITE_PROJECT_ID": "env-proj",
            "APPWRITE_DATABASE_ID": "env-db",
            "APPWRITE_API_KEY": "env-key",
        }

        mock_app_class = run_main(["--group", "brazil"], env)

        store = mock_app_class.call_args.args[0].store
        assert isinstance(store, AppwriteAPI)
        assert store.base_url == "https://appwrite.example/v1/databases/env-db/collections"

    def test_group_is_required(self):
        """Test that hosted mode exits without a group"""
        with pytest.raises(SystemExit):
            run_main(["--project", "proj-1", "--database", "db-1"])
