"""Test module for xmlpicker package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import xmlpicker

    # Assert
    assert xmlpicker is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import xmlpicker

    # Assert
    assert isinstance(xmlpicker.__version__, str)
    assert xmlpicker.__version__ == "0.1.0"


def test_package_all_exports() -> None:
    """Test that every name in __all__ is importable."""
    # Arrange & Act
    import xmlpicker

    # Assert
    for name in xmlpicker.__all__:
        assert hasattr(xmlpicker, name), name


def test_package_end_to_end() -> None:
    """Test picking and exporting through the top-level names."""
    # Arrange
    import xmlpicker

    xml = '<r xmlns="urn:r"><item n="1"/><item n="2"/></r>'

    # Act
    nodes = xmlpicker.pick_string(xml, "/r/")

    # Assert
    assert [xmlpicker.to_xml(node) for node in nodes] == [
        '<r xmlns="urn:r"><item n="1"></item></r>',
        '<r xmlns="urn:r"><item n="2"></item></r>',
    ]
