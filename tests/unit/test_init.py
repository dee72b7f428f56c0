"""Test the main package initialization."""


def test_import_main_package() -> None:
    """Test that the main package can be imported without errors."""
    import classschema

    assert classschema.__version__ == "0.1.0"


class TestPackageStructure:
    """Test the package structure and imports."""

    def test_core_module_import(self) -> None:
        """Test that core module can be imported."""
        from classschema import core

        assert core.ClassSchema is not None
        assert core.ReflectionService is not None

    def test_cli_module_import(self) -> None:
        """Test that CLI module can be imported."""
        from classschema import cli

        assert callable(cli.main)

    def test_validation_module_import(self) -> None:
        """Test that validation module can be imported."""
        from classschema import validation

        assert validation.ValidatorInterface is not None

    def test_domain_module_import(self) -> None:
        """Test that domain module can be imported."""
        from classschema import domain

        assert issubclass(domain.AbstractEntity, domain.DomainObject)
        assert issubclass(domain.AbstractValueObject, domain.DomainObject)
