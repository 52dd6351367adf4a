import pytest

from vimline.host import cursor_style_for
from vimline.runtime import CursorStyle, OverlayOptions, SurroundScheme


def test_defaults() -> None:
    options = OverlayOptions()

    assert options.keytimeout_ms == 300
    assert options.surround_bindkey is SurroundScheme.CLASSIC
    assert options.region_highlight == "#cc0000"
    assert options.insert_mode_legacy_undo is False


def test_from_env_without_overrides() -> None:
    assert OverlayOptions.from_env({}) == OverlayOptions()


def test_from_env_reads_prefixed_variables() -> None:
    options = OverlayOptions.from_env(
        {
            "VIMLINE_KEYTIMEOUT": "0.05",
            "VIMLINE_SURROUND_BINDKEY": "s-prefix",
            "VIMLINE_REGION_HIGHLIGHT": "blue",
            "VIMLINE_INSERT_MODE_LEGACY_UNDO": "yes",
        }
    )

    assert options.keytimeout_ms == 50
    assert options.surround_bindkey is SurroundScheme.S_PREFIX
    assert options.region_highlight == "blue"
    assert options.insert_mode_legacy_undo is True


def test_xterm_cursor_styles() -> None:
    options = OverlayOptions.from_env({"TERM": "xterm-256color"})

    assert options.normal_mode_cursor == CursorStyle.XTERM_BLOCK.value
    assert options.insert_mode_cursor == CursorStyle.XTERM_BEAM.value


def test_explicit_cursor_styles_override_terminal() -> None:
    options = OverlayOptions.from_env(
        {"TERM": "xterm", "VIMLINE_NORMAL_MODE_CURSOR": "\x1b[1 q"}
    )

    assert options.normal_mode_cursor == CursorStyle.BLINKING_BLOCK.value
    assert options.insert_mode_cursor == CursorStyle.XTERM_BEAM.value


@pytest.mark.parametrize(
    "environ",
    [
        {"VIMLINE_KEYTIMEOUT": "soon"},
        {"VIMLINE_KEYTIMEOUT": "0"},
        {"VIMLINE_SURROUND_BINDKEY": "emacs"},
        {"VIMLINE_REGION_HIGHLIGHT": ""},
    ],
)
def test_invalid_values_rejected(environ: dict[str, str]) -> None:
    with pytest.raises(ValueError):
        OverlayOptions.from_env(environ)


def test_cursor_style_for_modes() -> None:
    options = OverlayOptions()

    assert cursor_style_for("insert", options) == CursorStyle.BEAM.value
    assert cursor_style_for("normal", options) == CursorStyle.BLOCK.value
    assert cursor_style_for("visual", options) == CursorStyle.BLOCK.value
