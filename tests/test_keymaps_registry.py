import pytest

from vimline.keymaps import (
    ActionRef,
    Binding,
    DirectAction,
    KeySequence,
    KeyStroke,
    KeymapConflictError,
    KeymapRegistry,
    SequenceAction,
)
from vimline.keymaps.defaults import load_default_keymaps
from vimline.runtime import OverlayOptions, SurroundScheme


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    mode: str = "normal",
    keys: str = "gg",
    action_id: str = "core.test",
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.parse(keys),
        target=DirectAction(action_id),
    )


def make_registry(*action_ids: str) -> KeymapRegistry:
    registry = KeymapRegistry()
    for action_id in action_ids or ("core.test",):
        registry.register_action(make_action(action_id))
    return registry


def test_register_binding_success() -> None:
    registry = make_registry()
    binding = make_binding(binding_id="normal.gg")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode="normal")) == [binding]


def test_register_binding_conflict_detection() -> None:
    registry = make_registry()
    registry.register_binding(make_binding(binding_id="normal.gg"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="normal.gg.duplicate"))


def test_register_binding_requires_known_action() -> None:
    registry = make_registry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="normal.zz", action_id="missing"))


def test_bind_wraps_leading_key_of_longer_sequence() -> None:
    registry = make_registry("core.test", "core.other")
    registry.register_binding(make_binding(binding_id="normal.g", keys="g"))

    registry.bind("normal", "gx", "core.other")

    head = registry.lookup("normal", "g")
    assert head is not None
    assert head.target == SequenceAction(fallback_id="core.test")
    assert head.action_id == "core.test"
    assert registry.lookup("normal", "gx").action_id == "core.other"


def test_bind_without_action_wraps_existing_key() -> None:
    registry = make_registry()
    registry.register_binding(make_binding(binding_id="normal.d", keys="d"))

    wrapper = registry.bind("normal", "d", None)

    assert wrapper is not None
    assert wrapper.is_wrapper
    assert wrapper.action_id == "core.test"


def test_bind_does_not_rewrap_wrapper() -> None:
    registry = make_registry("core.test", "core.other")
    registry.register_binding(make_binding(binding_id="normal.d", keys="d"))
    registry.bind("normal", "d", None)

    registry.bind("normal", "dd", "core.other")
    registry.bind("normal", "d", None)

    head = registry.lookup("normal", "d")
    assert head.target == SequenceAction(fallback_id="core.test")
    assert registry.stats().wrapper_count == 1


def test_bind_on_unbound_leading_key_adds_no_wrapper() -> None:
    registry = make_registry()

    registry.bind("visual", "S(", "core.test")

    assert registry.lookup("visual", "S") is None
    assert registry.stats().wrapper_count == 0


def test_bind_rejects_unknown_action() -> None:
    registry = make_registry()

    with pytest.raises(KeyError):
        registry.bind("normal", "zz", "core.missing")


def test_candidates_share_prefix() -> None:
    registry = make_registry()
    for keys in ("ci(", "ci[", "cc", "x"):
        registry.bind("normal", keys, "core.test")

    found = {binding.key_signature for binding in registry.candidates("normal", "ci")}

    assert found == {"c i (", "c i ["}
    assert registry.candidates("normal", "q") == []


def test_unregister_binding() -> None:
    registry = make_registry()
    registry.register_binding(make_binding(binding_id="normal.gg"))

    removed = registry.unregister_binding("normal.gg")

    assert removed is not None
    assert registry.lookup("normal", "gg") is None
    assert registry.candidates("normal", "g") == []


def test_default_keymaps_wrap_operators() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry)

    for operator in ("c", "d", "y"):
        head = registry.lookup("normal", operator)
        assert head is not None and head.is_wrapper
        assert head.action_id == "operator.pending"
    assert registry.lookup("normal", "dd").action_id == "operator.delete_line"
    assert registry.lookup("normal", "ci(").action_id == "surround.text_object"
    assert registry.lookup("normal", "ds\"").action_id == "surround.delete"
    assert registry.lookup("visual", "S[").action_id == "surround.add"
    assert registry.lookup("visual", "a ").action_id == "surround.select"


def test_default_keymaps_s_prefix_scheme() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(
        registry, options=OverlayOptions(surround_bindkey=SurroundScheme.S_PREFIX)
    )

    assert registry.lookup("normal", "sd(").action_id == "surround.delete"
    assert registry.lookup("normal", "sr'").action_id == "surround.change"
    assert registry.lookup("visual", "sa{").action_id == "surround.add"
    assert registry.lookup("normal", "ds(") is None
    assert registry.lookup("visual", "S(") is None
    assert registry.lookup("normal", "s").action_id == "core.substitute"


def test_default_keymaps_exclude_actions() -> None:
    registry = KeymapRegistry()
    load_default_keymaps(registry, exclude_actions=["surround.move_around"])

    assert not registry.has_action("surround.move_around")
    assert registry.lookup("normal", "%") is None


def test_key_sequence_parse_notation() -> None:
    sequence = KeySequence.parse("^[ci(<f1>^")

    assert sequence.strokes == (
        KeyStroke.control("["),
        KeyStroke.char("c"),
        KeyStroke.char("i"),
        KeyStroke.char("("),
        KeyStroke.named("f1"),
        KeyStroke.char("^"),
    )
    assert sequence[0].is_escape
    assert sequence.chars == "^[ci(<f1>^"


def test_key_stroke_from_raw() -> None:
    assert KeyStroke.from_raw("\x1b").is_escape
    assert KeyStroke.from_raw("\x7f") == KeyStroke.control("?")
    assert KeyStroke.from_raw(" ").text == " "
    with pytest.raises(ValueError):
        KeyStroke.char("ab")
