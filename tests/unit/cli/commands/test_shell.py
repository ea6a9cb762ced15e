"""
Unit tests for the interactive shell.
"""

import pytest
from click.testing import CliRunner

from topolens.cli.commands.shell import ShellDispatcher
from topolens.cli.main import main


@pytest.fixture
def dispatcher(session):
    return ShellDispatcher(session)


class TestShellDispatcher:
    def test_quit(self, dispatcher):
        assert dispatcher.dispatch("quit") is False
        assert dispatcher.dispatch("EXIT") is False

    def test_blank_line(self, dispatcher):
        assert dispatcher.dispatch("   ") is True

    def test_unknown_command(self, dispatcher, capsys):
        assert dispatcher.dispatch("frobnicate") is True
        assert "Unknown command" in capsys.readouterr().err

    def test_unbalanced_quotes(self, dispatcher, capsys):
        assert dispatcher.dispatch('search "order') is True
        assert "Cannot parse command" in capsys.readouterr().err

    def test_search_then_hide(self, dispatcher):
        dispatcher.dispatch("set clear on")
        dispatcher.dispatch("search order")
        assert dispatcher.session.view.node_indices() == {1, 4}

        dispatcher.dispatch("hide-node 4")
        assert dispatcher.session.view.node_indices() == {1}

    def test_paths(self, dispatcher):
        dispatcher.dispatch("paths gateway billing forward 3")
        assert dispatcher.session.last_path_result.paths == [[0, 1, 2], [0, 3, 2]]

    def test_reach_restrict(self, dispatcher):
        dispatcher.dispatch("reach 1 outgoing 1 restrict")
        assert dispatcher.session.view.node_indices() == {1, 2, 4}

    def test_set_scope(self, dispatcher):
        dispatcher.dispatch("set scope on")
        assert dispatcher.session.scope_to_current_view

    def test_hide_category_and_reset(self, dispatcher):
        dispatcher.dispatch("hide-category 1")
        assert dispatcher.session.view.node_indices() == {0, 1}

        dispatcher.dispatch("reset")
        assert len(dispatcher.session.view.nodes) == 5

    def test_hide_edge_and_clear(self, dispatcher):
        dispatcher.dispatch("hide-edge 0 1")
        assert (0, 1) not in dispatcher.session.view.edge_keys()

        dispatcher.dispatch("clear-edges")
        assert dispatcher.session.view.edges == ()

        dispatcher.dispatch("clear")
        assert dispatcher.session.view.nodes == ()

    @pytest.mark.parametrize("line", [
        "hide-node 99",
        "hide-node abc",
        "reach",
        "paths gateway",
        "paths gateway billing sideways",
        "set clear maybe",
        "search",
    ])
    def test_errors_are_reported_not_raised(self, dispatcher, capsys, line):
        assert dispatcher.dispatch(line) is True
        assert capsys.readouterr().err

    def test_export(self, dispatcher, tmp_path):
        out = tmp_path / "shell.html"
        dispatcher.dispatch(f"export {out}")
        assert out.exists()


class TestShellCommand:
    def test_session_loop(self, topology_file):
        result = CliRunner().invoke(
            main, ["shell", str(topology_file)],
            input="search order\nstats\nquit\n",
        )

        assert result.exit_code == 0
        assert "topolens shell" in result.output
        assert "Visible: 5 nodes / 5 edges" in result.output

    def test_end_of_input_exits(self, topology_file):
        result = CliRunner().invoke(main, ["shell", str(topology_file)], input="stats\n")
        assert result.exit_code == 0

    def test_live_html(self, topology_file, tmp_path):
        out = tmp_path / "live.html"
        result = CliRunner().invoke(
            main, ["shell", str(topology_file), "-o", str(out)],
            input="search order\nquit\n",
        )

        assert result.exit_code == 0
        assert out.exists()
