"""
Unit tests for input resolution and prompting
"""

from pathlib import Path

import pytest

from forge_extract.core.input_resolver import (
    InputResolver,
    Prompter,
    expand_home,
    resolve_contract,
    resolve_directory,
)
from forge_extract.tests.fakes import answers
from forge_extract.utils.exceptions import (
    ContractFileNotFoundError,
    DirectoryNotFoundError,
    InputError,
)


class TestExpandHome:
    """Test '~' expansion"""

    def test_tilde_prefix(self, home_dir):
        assert expand_home("~/demo", home_dir) == home_dir / "demo"

    def test_bare_tilde(self, home_dir):
        assert expand_home("~", home_dir) == home_dir

    def test_other_paths_untouched(self, home_dir):
        assert expand_home("demo/~x", home_dir) == Path("demo/~x")
        assert expand_home("/abs/path", home_dir) == Path("/abs/path")


class TestResolveDirectory:
    """Test project directory resolution"""

    def test_tilde_matches_expanded_form(self, config, project_dir):
        """~/demo and the explicit absolute path resolve identically"""
        assert resolve_directory("~/demo", config) == resolve_directory(str(project_dir), config)
        assert resolve_directory("~/demo", config) == project_dir.resolve()

    def test_relative_to_cwd(self, config, project_dir):
        assert resolve_directory("home/demo", config) == project_dir.resolve()

    def test_empty_means_cwd(self, config, tmp_path):
        assert resolve_directory("  ", config) == tmp_path.resolve()

    def test_missing_directory(self, config):
        with pytest.raises(DirectoryNotFoundError) as exc_info:
            resolve_directory("~/nope", config)
        assert exc_info.value.code == 2001


class TestResolveContract:
    """Test contract path normalisation"""

    def test_root_relative(self, config, project_dir):
        root = project_dir.resolve()
        assert resolve_contract("src/Token.sol", root, config) == Path("src/Token.sol")

    def test_absolute_under_root_becomes_relative(self, config, project_dir):
        root = project_dir.resolve()
        absolute = str(root / "src" / "Token.sol")
        assert resolve_contract(absolute, root, config) == Path("src/Token.sol")

    def test_dot_segments_normalised(self, config, project_dir):
        root = project_dir.resolve()
        assert resolve_contract("./src/../src/Token.sol", root, config) == Path("src/Token.sol")

    def test_outside_root_stays_absolute(self, config, project_dir, tmp_path):
        other = tmp_path / "Other.sol"
        other.write_text("contract Other {}\n")
        result = resolve_contract(str(other), project_dir.resolve(), config)
        assert result.is_absolute()
        assert result == other.resolve()

    def test_missing_file(self, config, project_dir):
        with pytest.raises(ContractFileNotFoundError):
            resolve_contract("src/Missing.sol", project_dir.resolve(), config)

    def test_directory_is_not_a_contract(self, config, project_dir):
        with pytest.raises(ContractFileNotFoundError):
            resolve_contract("src", project_dir.resolve(), config)

    def test_empty_path(self, config, project_dir):
        with pytest.raises(ContractFileNotFoundError):
            resolve_contract("", project_dir.resolve(), config)


class TestPrompter:
    """Test the prompt session"""

    def test_default_used_for_empty_answer(self):
        prompter = Prompter(answers(""))
        assert prompter.ask("Dir", default=".") == "."

    def test_answer_is_stripped(self):
        prompter = Prompter(answers("  src/Token.sol  "))
        assert prompter.ask("File") == "src/Token.sol"

    def test_eof_is_input_error(self):
        with pytest.raises(InputError):
            Prompter(answers()).ask("File")

    def test_closed_on_exit(self):
        with Prompter(answers("x")) as prompter:
            prompter.ask("Q")
        assert prompter.closed
        with pytest.raises(InputError):
            prompter.ask("Q")

    def test_closed_on_error(self):
        with pytest.raises(RuntimeError):
            with Prompter(answers()) as prompter:
                raise RuntimeError("boom")
        assert prompter.closed


class TestInputResolver:
    """Test flag/prompt precedence"""

    def test_flags_win_over_prompts(self, config, project_dir):
        config = config.apply({"project_dir": "~/demo", "contract_file": "src/Token.sol"})
        ask = answers()
        request = InputResolver(config, Prompter(ask)).resolve()

        assert ask.asked == []
        assert request.project_root == project_dir.resolve()
        assert request.contract_path == Path("src/Token.sol")
        assert request.contract_name == "Token"
        assert request.contract_file == "Token.sol"

    def test_prompts_fill_missing_values(self, config, project_dir):
        ask = answers("~/demo", "src/Token.sol", "build/Token.json")
        resolver = InputResolver(config, Prompter(ask))
        request = resolver.resolve()
        destination = resolver.resolve_output(request)

        assert len(ask.asked) == 3
        assert "build/Token.json" in ask.asked[2]
        assert destination == (config.cwd / "build" / "Token.json").resolve()

    def test_output_default_suggestion(self, config, project_dir):
        ask = answers("~/demo", "src/Token.sol", "")
        resolver = InputResolver(config, Prompter(ask))
        destination = resolver.resolve_output(resolver.resolve())
        assert destination.name == "Token.json"
        assert destination.parent.name == "build"

    def test_non_interactive_requires_file(self, config, project_dir):
        config = config.apply({"project_dir": str(project_dir), "interactive": False})
        with pytest.raises(InputError):
            InputResolver(config, Prompter(answers())).resolve()
