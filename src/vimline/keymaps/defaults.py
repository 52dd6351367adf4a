"""Built-in keymaps that seed each mode with vi defaults and the overlay keys."""

from __future__ import annotations

from functools import partial
from typing import Mapping, Sequence

from vimline.actions import core as core_actions
from vimline.actions import host as host_actions
from vimline.actions import insert as insert_actions
from vimline.actions import operator as operator_actions
from vimline.actions import surround as surround_actions
from vimline.actions import visual as visual_actions
from vimline.runtime import OverlayOptions, SurroundScheme

from .models import ActionRef, Binding, DirectAction, KeySequence
from .registry import KeymapRegistry, binding_id_for

# Host primitives reachable straight from a key.
HOST_PRIMITIVES: tuple[str, ...] = (
    "vi-backward-char",
    "vi-forward-char",
    "backward-char",
    "forward-char",
    "vi-forward-word",
    "vi-forward-word-end",
    "vi-backward-word",
    "vi-beginning-of-line",
    "beginning-of-line",
    "vi-first-non-blank",
    "vi-end-of-line",
    "end-of-line",
    "up-line-or-history",
    "down-line-or-history",
    "backward-delete-char",
    "backward-kill-word",
    "vi-delete-char",
    "vi-put-after",
    "vi-put-before",
    "undo",
    "history-incremental-search-backward",
    "history-incremental-search-forward",
    "accept-line",
)

FIND_PRIMITIVES: tuple[str, ...] = (
    "vi-find-next-char",
    "vi-find-prev-char",
    "vi-find-next-char-skip",
    "vi-find-prev-char-skip",
)

SURROUND_DELIMITERS: tuple[str, ...] = tuple("()[]{}<>'\"` ")

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id="core.enter_insert",
        handler=core_actions.enter_insert_mode,
        description="Insert before the cursor",
    ),
    ActionRef(
        id="core.enter_append",
        handler=core_actions.enter_append_mode,
        description="Insert after the cursor",
    ),
    ActionRef(
        id="core.exit_to_normal",
        handler=core_actions.exit_to_normal_mode,
        description="Return to normal mode",
    ),
    ActionRef(
        id="core.enter_visual",
        handler=core_actions.enter_visual_mode,
        description="Enter visual mode",
    ),
    ActionRef(
        id="core.open_line_below",
        handler=core_actions.open_line_below,
        description="Open a line below and insert",
    ),
    ActionRef(
        id="core.open_line_above",
        handler=core_actions.open_line_above,
        description="Open a line above and insert",
    ),
    ActionRef(
        id="core.substitute",
        handler=core_actions.substitute,
        description="Delete the character under the cursor and insert",
    ),
    ActionRef(
        id="core.noop",
        handler=core_actions.noop_action,
        description="Do nothing",
    ),
    ActionRef(
        id="operator.pending",
        handler=core_actions.operator_pending,
        description="Wait for the operator's motion",
    ),
    ActionRef(
        id="operator.yank_line",
        handler=operator_actions.yank_line,
        description="Yank the current line",
    ),
    ActionRef(
        id="operator.delete_line",
        handler=operator_actions.delete_line,
        description="Delete the current line",
    ),
    ActionRef(
        id="operator.change_line",
        handler=operator_actions.change_line,
        description="Change the current line",
    ),
    ActionRef(
        id="visual.cancel_selection",
        handler=visual_actions.cancel_selection,
        description="Leave visual mode, restoring an untouched text-object selection",
    ),
    ActionRef(
        id="visual.yank_selection",
        handler=visual_actions.yank_selection,
        description="Yank current visual selection",
    ),
    ActionRef(
        id="visual.delete_selection",
        handler=visual_actions.delete_selection,
        description="Delete current selection",
    ),
    ActionRef(
        id="visual.change_selection",
        handler=visual_actions.change_selection,
        description="Change current selection",
    ),
    ActionRef(
        id="visual.swap_anchor",
        handler=visual_actions.swap_anchor,
        description="Swap selection anchor",
    ),
    ActionRef(
        id="visual.select_in_word",
        handler=partial(visual_actions.select_word, primitive="select-in-word"),
        description="Select the word under the cursor",
    ),
    ActionRef(
        id="visual.select_a_word",
        handler=partial(visual_actions.select_word, primitive="select-a-word"),
        description="Select the word and its surrounding blanks",
    ),
    ActionRef(
        id="surround.select",
        handler=surround_actions.select_surround,
        description="Select inside or around a delimiter pair",
    ),
    ActionRef(
        id="surround.add",
        handler=surround_actions.add_surround,
        description="Wrap the selection in a delimiter pair",
    ),
    ActionRef(
        id="surround.change",
        handler=surround_actions.change_surround,
        description="Replace the delimiter pair around the cursor",
    ),
    ActionRef(
        id="surround.delete",
        handler=surround_actions.delete_surround,
        description="Remove the delimiter pair around the cursor",
    ),
    ActionRef(
        id="surround.text_object",
        handler=surround_actions.surround_text_object,
        description="Operate on the text inside or around a delimiter pair",
    ),
    ActionRef(
        id="surround.move_around",
        handler=surround_actions.move_around_surround,
        description="Jump between matching delimiters",
    ),
    ActionRef(
        id="insert.forward_kill_line",
        handler=insert_actions.forward_kill_line,
        description="Delete after the cursor",
    ),
    ActionRef(
        id="insert.backward_kill_line",
        handler=insert_actions.backward_kill_line,
        description="Delete before the cursor",
    ),
    ActionRef(
        id="insert.kill_line",
        handler=insert_actions.kill_line,
        description="Cut the current line",
    ),
    ActionRef(
        id="insert.undo",
        handler=insert_actions.viins_undo,
        description="Insert-mode undo (kill before cursor or the whole line)",
    ),
    ActionRef(
        id="insert.paste",
        handler=insert_actions.paste_register,
        description="Insert the register contents",
    ),
) + tuple(
    ActionRef(
        id=f"host.{primitive}",
        handler=partial(host_actions.run_primitive, primitive=primitive),
        description=f"Host primitive {primitive}",
    )
    for primitive in HOST_PRIMITIVES
) + tuple(
    ActionRef(
        id=f"host.{primitive}",
        handler=partial(host_actions.find_char, primitive=primitive),
        description=f"Host primitive {primitive}",
    )
    for primitive in FIND_PRIMITIVES
)

# Motions shared by Normal and Visual mode.
_MOTION_KEYS: tuple[tuple[str, str], ...] = (
    ("h", "host.vi-backward-char"),
    ("l", "host.vi-forward-char"),
    (" ", "host.vi-forward-char"),
    ("j", "host.down-line-or-history"),
    ("k", "host.up-line-or-history"),
    ("w", "host.vi-forward-word"),
    ("e", "host.vi-forward-word-end"),
    ("b", "host.vi-backward-word"),
    ("0", "host.vi-beginning-of-line"),
    ("^", "host.vi-first-non-blank"),
    ("$", "host.vi-end-of-line"),
    ("f", "host.vi-find-next-char"),
    ("F", "host.vi-find-prev-char"),
    ("t", "host.vi-find-next-char-skip"),
    ("T", "host.vi-find-prev-char-skip"),
)

# Bindings the host line editor already has before the overlay installs.
NATIVE_BINDINGS: Mapping[str, tuple[tuple[str, str], ...]] = {
    "normal": _MOTION_KEYS
    + (
        ("p", "host.vi-put-after"),
        ("P", "host.vi-put-before"),
        ("x", "host.vi-delete-char"),
        ("u", "host.undo"),
        ("c", "operator.pending"),
        ("d", "operator.pending"),
        ("y", "operator.pending"),
        ("s", "core.substitute"),
        ("^M", "host.accept-line"),
        ("^[", "core.noop"),
    ),
    "visual": _MOTION_KEYS
    + (
        ("iw", "visual.select_in_word"),
        ("aw", "visual.select_a_word"),
        ("o", "visual.swap_anchor"),
    ),
    "insert": (
        ("^A", "host.beginning-of-line"),
        ("^E", "host.end-of-line"),
        ("^B", "host.backward-char"),
        ("^F", "host.forward-char"),
        ("^W", "host.backward-kill-word"),
        ("^_", "host.undo"),
        ("^R", "host.history-incremental-search-backward"),
        ("^S", "host.history-incremental-search-forward"),
        ("^P", "host.up-line-or-history"),
        ("^N", "host.down-line-or-history"),
        ("^?", "host.backward-delete-char"),
        ("^H", "host.backward-delete-char"),
        ("^M", "host.accept-line"),
    ),
}


def overlay_bindings(
    options: OverlayOptions,
) -> tuple[tuple[str, str, str | None], ...]:
    """``(mode, keys, action_id)`` triples installed through ``bind``.

    A ``None`` action wraps the key's native action so longer sequences
    can share it as a prefix.
    """

    entries: list[tuple[str, str, str | None]] = [
        ("insert", "^K", "insert.forward_kill_line"),
        ("insert", "^U", "insert.undo"),
        ("insert", "^Y", "insert.paste"),
        ("insert", "^[", "core.exit_to_normal"),
        ("normal", "i", "core.enter_insert"),
        ("normal", "a", "core.enter_append"),
        ("normal", "v", "core.enter_visual"),
        ("normal", "o", "core.open_line_below"),
        ("normal", "O", "core.open_line_above"),
        ("normal", "s", "core.substitute"),
        ("visual", "^[", "visual.cancel_selection"),
        ("visual", "c", "visual.change_selection"),
        ("visual", "d", "visual.delete_selection"),
        ("visual", "y", "visual.yank_selection"),
    ]
    for operator in ("y", "d", "c"):
        entries.append(("normal", operator, None))
    entries.extend(
        [
            ("normal", "yy", "operator.yank_line"),
            ("normal", "dd", "operator.delete_line"),
            ("normal", "cc", "operator.change_line"),
        ]
    )

    s_prefix = options.surround_bindkey is SurroundScheme.S_PREFIX
    for delimiter in SURROUND_DELIMITERS:
        for scope in ("a", "i"):
            entries.append(("visual", f"{scope}{delimiter}", "surround.select"))
            for operator in ("c", "d", "y"):
                entries.append(
                    ("normal", f"{operator}{scope}{delimiter}", "surround.text_object")
                )
        if s_prefix:
            entries.append(("normal", f"sd{delimiter}", "surround.delete"))
            entries.append(("normal", f"sr{delimiter}", "surround.change"))
            entries.append(("visual", f"sa{delimiter}", "surround.add"))
        else:
            entries.append(("normal", f"ds{delimiter}", "surround.delete"))
            entries.append(("normal", f"cs{delimiter}", "surround.change"))
            entries.append(("visual", f"S{delimiter}", "surround.add"))
            entries.append(("visual", f"ys{delimiter}", "surround.add"))

    entries.append(("normal", "%", "surround.move_around"))
    entries.append(("insert", "^?", "host.backward-delete-char"))
    return tuple(entries)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    options: OverlayOptions | None = None,
    exclude_actions: Sequence[str] | None = None,
) -> None:
    """Register built-in actions, native bindings, then the overlay keys.

    Native bindings are registered first so the overlay's ``bind`` calls can
    wrap them, the way the overlay augments a host's own keymap.
    """

    options = options or OverlayOptions()
    excluded = set(exclude_actions or ())

    for action in DEFAULT_ACTIONS:
        if action.id in excluded:
            continue
        registry.register_action(action)

    for mode, pairs in NATIVE_BINDINGS.items():
        for keys, action_id in pairs:
            if not registry.has_action(action_id):
                continue
            sequence = KeySequence.parse(keys)
            registry.register_binding(
                Binding(
                    id=binding_id_for(mode, sequence),
                    mode=mode,
                    sequence=sequence,
                    target=DirectAction(action_id),
                    description=registry.get_action(action_id).description,
                    source="native",
                ),
                replace=True,
            )

    for mode, keys, action_id in overlay_bindings(options):
        if action_id is not None and not registry.has_action(action_id):
            continue
        description = registry.get_action(action_id).description if action_id else ""
        registry.bind(mode, keys, action_id, description=description, source="overlay")


__all__ = [
    "DEFAULT_ACTIONS",
    "FIND_PRIMITIVES",
    "HOST_PRIMITIVES",
    "NATIVE_BINDINGS",
    "SURROUND_DELIMITERS",
    "load_default_keymaps",
    "overlay_bindings",
]
