"""Basic package tests for dep-audit."""


def test_package_imports() -> None:
    """Test that the main package can be imported."""
    import dep_audit

    assert dep_audit.__version__ == "0.1.0"


def test_cli_imports() -> None:
    """Test that the CLI module can be imported."""
    from dep_audit.cli import main

    assert main is not None


def test_subpackages_import() -> None:
    """Test that all subpackages can be imported."""
    import dep_audit.analysis
    import dep_audit.config
    import dep_audit.models
    import dep_audit.output
    import dep_audit.report
    import dep_audit.resolvers

    assert dep_audit.analysis is not None
    assert dep_audit.config is not None
    assert dep_audit.models is not None
    assert dep_audit.output is not None
    assert dep_audit.report is not None
    assert dep_audit.resolvers is not None
