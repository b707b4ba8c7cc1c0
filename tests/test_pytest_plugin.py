from __future__ import annotations

from pathlib import Path
import textwrap
import tomllib


def _setup(pytester, config_text: str | None = None) -> None:
    pytester.makeini("[pytest]\n")
    pytester.makeconftest('pytest_plugins = ["chainmock.pytest_plugin"]\n')
    if config_text is not None:
        pytester.path.joinpath("chainmock.toml").write_text(config_text, encoding="utf-8")


_TESTS = textwrap.dedent(
    """
    import chainmock


    def test_satisfied(doubles):
        car = doubles.double("car")
        car.should_receive("chassis.axle.turn").once().and_return("ok")
        assert car.chassis().axle().turn() == "ok"


    def test_module_level_api(doubles):
        car = chainmock.double("car", {"engine.start": "vroom"})
        assert car.engine().start() == "vroom"
        assert chainmock.current_container() is doubles


    def test_unsatisfied(doubles):
        doubles.double("mailer").should_receive("send").once()
    """
)


def test_fixture_verifies_expectations_after_passing_tests(pytester) -> None:
    _setup(pytester)
    pytester.makepyfile(test_chains=_TESTS)
    result = pytester.runpytest()
    result.assert_outcomes(passed=3, errors=1)
    result.stdout.fnmatch_lines(["*CallCountError*exactly once*"])


def test_fixture_does_not_pile_verification_onto_failed_tests(pytester) -> None:
    _setup(pytester)
    pytester.makepyfile(
        test_failing="""
        def test_fails_first(doubles):
            doubles.double("mailer").should_receive("send").once()
            assert False, "body failed"
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(failed=1, errors=0)


def test_fixture_restores_partials(pytester) -> None:
    _setup(pytester)
    pytester.makepyfile(
        test_partials="""
        class Engine:
            def start(self):
                return "vroom"

        ENGINE = Engine()


        def test_patch(doubles):
            doubles.partial(ENGINE).should_receive("start").and_return("sputter")
            assert ENGINE.start() == "sputter"


        def test_restored():
            assert ENGINE.start() == "vroom"
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=2)


def test_fixture_reads_config_file(pytester) -> None:
    _setup(
        pytester,
        '[doubles]\nverify_on_teardown = false\nchild_name_template = "{parent}/{method}"\n',
    )
    pytester.makepyfile(
        test_configured="""
        def test_unsatisfied_but_unverified(doubles):
            car = doubles.double("car")
            car.should_receive("engine.start").once()
            assert repr(car.engine()) == "<Double 'car/engine'>"
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=1)


def test_fixture_reads_config_path_from_ini(pytester) -> None:
    pytester.makeini("[pytest]\nchainmock_config = settings/mocks.toml\n")
    pytester.makeconftest('pytest_plugins = ["chainmock.pytest_plugin"]\n')
    settings = pytester.mkdir("settings")
    settings.joinpath("mocks.toml").write_text(
        "[doubles]\nverify_on_teardown = false\n", encoding="utf-8"
    )
    pytester.makepyfile(
        test_ini="""
        def test_unverified(doubles):
            doubles.double("mailer").should_receive("send").once()
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(passed=1)


def test_plugin_dependency_is_declared_as_an_extra() -> None:
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    extras = data["project"]["optional-dependencies"]
    assert any(requirement.startswith("pytest") for requirement in extras["pytest"])
