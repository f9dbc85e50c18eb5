"""End-to-end tests for the hook engine"""

from unittest.mock import Mock

import pytest

from conftest import ZERO_SHA, commit_all, run_git
from gitgate.core.config import Settings
from gitgate.core.context import FileListContext
from gitgate.core.engine import HookEngine
from gitgate.core.errors import (
    ConfigurationError,
    DuplicatePluginError,
    PluginLoadError,
    UnsupportedHookError,
)
from gitgate.core.hooks import HookInvocation, HookName
from gitgate.core.results import Decision, format_report
from gitgate.git.git_types import ChangeKind, FileChange
from gitgate.plugins.base import CheckResult, VerdictStatus
from gitgate.plugins.builtin import CheckLogPlugin
from gitgate.plugins.loader import PluginLoader
from gitgate.plugins.registry import PluginRegistry


@pytest.fixture
def settings():
    return Settings()


def create_engine(repo, settings, **kwargs):
    return HookEngine.create(repo_path=repo, settings=settings, **kwargs)


class TestHookEngine:
    """Test full hook runs in a scratch repository"""

    def test_clean_commit_accepted(self, git_repo, settings):
        (git_repo / "main.py").write_text("print('hello')\n")
        run_git(git_repo, "add", "main.py")

        result = create_engine(git_repo, settings).run(HookInvocation("pre-commit"))

        assert result.overall == Decision.ACCEPT
        assert {v.plugin_name for v in result.verdicts} == {"check_content", "check_file"}
        assert format_report(result) == []

    def test_forbidden_file_rejected(self, git_repo, settings):
        (git_repo / ".env").write_text("SECRET=1\n")
        (git_repo / "main.py").write_text("print('hello')\n")
        run_git(git_repo, "add", "-A")

        result = create_engine(git_repo, settings).run(HookInvocation("pre-commit"))

        assert result.overall == Decision.REJECT
        assert result.exit_code == 1
        assert result.failed_plugins == ["check_file"]
        report = format_report(result)
        assert report[0].startswith("[check_file] .env: forbidden file")
        assert report[-1] == "pre-commit rejected: 1 plugin(s) failed, 0 plugin(s) errored"

    def test_conflict_markers_rejected(self, git_repo, settings):
        (git_repo / "a.txt").write_text("<<<<<<< HEAD\nmine\n=======\ntheirs\n>>>>>>> other\n")
        run_git(git_repo, "add", "a.txt")

        result = create_engine(git_repo, settings).run(HookInvocation("pre-commit"))

        assert result.failed_plugins == ["check_content"]

    def test_submodule_pointer_accepted(self, git_repo, settings, tmp_path):
        library = tmp_path / "library"
        library.mkdir()
        run_git(library, "init", "-q")
        run_git(library, "config", "user.name", "Test User")
        run_git(library, "config", "user.email", "test@example.com")
        run_git(library, "config", "commit.gpgsign", "false")
        (library / "lib.py").write_text("VALUE = 1\n")
        commit_all(library)
        run_git(
            git_repo, "-c", "protocol.file.allow=always", "submodule", "add", "-q", str(library), "lib"
        )

        result = create_engine(git_repo, settings).run(HookInvocation("pre-commit"))

        assert result.overall == Decision.ACCEPT
        assert result.errored_plugins == []
        lib_verdicts = {v.plugin_name: v for v in result.verdicts if v.target == "lib"}
        assert lib_verdicts["check_file"].status == VerdictStatus.PASS
        assert lib_verdicts["check_content"].status == VerdictStatus.SKIP
        assert lib_verdicts["check_content"].message == "submodule"

    def test_nothing_staged(self, git_repo, settings):
        result = create_engine(git_repo, settings).run(HookInvocation("pre-commit"))

        assert result.accepted
        assert all(v.status == VerdictStatus.SKIP for v in result.verdicts)

    def test_commit_msg(self, git_repo, settings):
        message_file = git_repo / ".git" / "COMMIT_EDITMSG"
        engine = create_engine(git_repo, settings)

        message_file.write_text("Add feature\n\nDetails here.\n# Please enter a message\n")
        accepted = engine.run(HookInvocation("commit-msg", (".git/COMMIT_EDITMSG",)))

        message_file.write_text("# Please enter a message\n")
        rejected = engine.run(HookInvocation("commit-msg", (str(message_file),)))

        assert accepted.accepted
        assert not rejected.accepted
        assert format_report(rejected)[0] == "[check_log]: commit message is empty"

    def test_update_hook_fast_forward(self, git_repo, settings):
        (git_repo / "a.txt").write_text("1\n")
        first = commit_all(git_repo, "First")
        (git_repo / "a.txt").write_text("2\n")
        second = commit_all(git_repo, "Second")
        engine = create_engine(git_repo, settings)

        forward = engine.run(HookInvocation("update", ("refs/heads/main", first, second)))
        backward = engine.run(HookInvocation("update", ("refs/heads/main", second, first)))
        delete = engine.run(HookInvocation("update", ("refs/heads/main", second, ZERO_SHA)))

        assert forward.accepted
        assert not backward.accepted
        assert not delete.accepted

    def test_post_receive_has_no_builtin_checks(self, git_repo, settings):
        invocation = HookInvocation(
            "post-receive", (f"{ZERO_SHA} {'a' * 40} refs/heads/main",)
        )

        result = create_engine(git_repo, settings).run(invocation)

        assert result.accepted
        assert result.verdicts == ()

    def test_config_disables_plugin(self, git_repo, settings):
        (git_repo / ".gitgate.yml").write_text("disabled_plugins: [check_file]\n")
        (git_repo / ".env").write_text("SECRET=1\n")
        run_git(git_repo, "add", ".env")

        result = create_engine(git_repo, settings).run(HookInvocation("pre-commit"))

        assert result.accepted
        assert "check_file" not in result.by_plugin()

    def test_config_settings_reach_plugin(self, git_repo, settings):
        (git_repo / ".gitgate.yml").write_text(
            "plugins:\n  check_log:\n    settings:\n      allow_empty: true\n"
        )
        (git_repo / "MSG").write_text("")

        result = create_engine(git_repo, settings).run(HookInvocation("commit-msg", ("MSG",)))

        assert result.accepted

    def test_explicit_config_file(self, git_repo, settings, tmp_path):
        config = tmp_path / "other.yml"
        config.write_text("disabled_plugins: [check_log]\n")
        (git_repo / "MSG").write_text("")

        engine = create_engine(git_repo, settings, config_file=config)
        result = engine.run(HookInvocation("commit-msg", ("MSG",)))

        assert result.accepted

    def test_invalid_config(self, git_repo, settings):
        (git_repo / ".gitgate.yml").write_text("plugins:\n  check_log:\n    nonsense: 1\n")

        with pytest.raises(ConfigurationError):
            create_engine(git_repo, settings)

    def test_unsupported_hook(self, git_repo, settings):
        engine = create_engine(git_repo, settings)

        with pytest.raises(UnsupportedHookError):
            engine.run(HookInvocation("post-checkout"))

    def test_custom_loader(self, git_repo, settings):
        engine = create_engine(git_repo, settings, loader=PluginLoader([CheckLogPlugin]))

        assert engine.registry.list_plugins() == ["check_log"]

    def test_duplicate_plugin_module(self, git_repo, settings):
        (git_repo / ".gitgate.yml").write_text(
            "plugin_modules:\n  - gitgate.plugins.builtin.check_log:CheckLogPlugin\n"
        )

        with pytest.raises(DuplicatePluginError):
            create_engine(git_repo, settings)

    def test_evaluate_with_prebuilt_context(self, make_descriptor):
        failing = make_descriptor("failing", check_fn=lambda c, t: CheckResult.fail("no"))
        engine = HookEngine(PluginRegistry([failing, make_descriptor("passing")]), Mock())
        context = FileListContext(
            HookName.PRE_COMMIT, (FileChange("a.py", ChangeKind.MODIFIED),)
        )

        result = engine.evaluate(context)

        assert result.overall == Decision.REJECT
        assert [v.plugin_name for v in result.verdicts] == ["failing", "passing"]


class TestPluginLoader:
    """Test loading plugin classes by name"""

    @pytest.mark.parametrize(
        "spec",
        [
            "gitgate.plugins.builtin.check_log:CheckLogPlugin",
            "gitgate.plugins.builtin.check_log.CheckLogPlugin",
        ],
    )
    def test_load_plugin_class(self, spec):
        assert PluginLoader().load_plugin_class(spec) is CheckLogPlugin

    @pytest.mark.parametrize(
        "spec",
        [
            "CheckLogPlugin",
            "gitgate.no_such_module:Plugin",
            "gitgate.plugins.builtin.check_log:Missing",
            "gitgate.plugins.base:Plugin",
            "gitgate.core.message:CommitMessage",
        ],
    )
    def test_load_plugin_class_errors(self, spec):
        with pytest.raises(PluginLoadError):
            PluginLoader().load_plugin_class(spec)

    def test_descriptors_get_settings(self):
        from gitgate.plugins.config import HookConfig

        config = HookConfig.model_validate(
            {"plugins": {"check_file": {"settings": {"file_patterns": ["*.py"]}}}}
        )

        descriptors = {d.name: d for d in PluginLoader().build_descriptors(config)}

        assert descriptors["check_file"].file_patterns == ("*.py",)
        assert descriptors["check_log"].file_patterns == ()
