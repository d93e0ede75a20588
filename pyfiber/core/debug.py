"""Debug helpers for inspecting fiber trees and render cycles.

This module avoids importing the reconciler so it can be used from anywhere.
Functions operate on any tree exposing ``walk()`` and ``depth_of()`` whose
nodes carry ``name``, ``props``, ``effect_tag`` and ``hooks``.
"""

import time
from typing import Any, Dict, List, Optional

RESET = "\x1b[0m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
FG_GRAY = "\x1b[90m"
FG_YELLOW = "\x1b[33m"
FG_MAGENTA = "\x1b[35m"
FG_CYAN = "\x1b[36m"
FG_BLUE = "\x1b[34m"
FG_GREEN = "\x1b[32m"
FG_RED = "\x1b[31m"

_TAG_COLORS = {
    "placement": FG_GREEN,
    "update": FG_BLUE,
    "deletion": FG_RED,
    "none": FG_GRAY,
}


def _fmt_val(v, depth: int = 0) -> str:
    if depth > 1:
        return f"{DIM}…{RESET}"
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return f"{FG_BLUE}{repr(v)}{RESET}"
    if isinstance(v, str):
        s = v.replace("\n", "\\n")
        text = s if len(s) <= 60 else s[:57] + "…"
        return f"{FG_YELLOW}{repr(text)}{RESET}"
    if v is None or isinstance(v, bool):
        return f"{FG_CYAN}{repr(v)}{RESET}"
    if isinstance(v, (list, tuple)):
        return f"{FG_CYAN}[{len(v)}]{RESET}"
    if hasattr(v, "items"):
        items = []
        for i, (k, val) in enumerate(v.items()):
            if i >= 5:
                items.append(f"{DIM}…{RESET}")
                break
            if k == "children":
                # children can be large; show only the count
                items.append(f"{FG_CYAN}children{RESET}=[{FG_YELLOW}{len(val)}{RESET}]")
            else:
                items.append(f"{FG_CYAN}{k}{RESET}={_fmt_val(val, depth + 1)}")
        return "{" + ", ".join(items) + "}"
    if callable(v):
        name = getattr(v, "__name__", None) or type(v).__name__
        return f"{FG_GREEN}<fn {name}>{RESET}"
    return f"{FG_GREEN}<{type(v).__name__}>{RESET}"


def format_tree(tree) -> List[str]:
    lines = []
    for fiber in tree.walk():
        pad = "  " * tree.depth_of(fiber)
        tag = getattr(fiber.effect_tag, "value", str(fiber.effect_tag))
        tag_col = f"{_TAG_COLORS.get(tag, FG_GRAY)}{tag}{RESET}"
        hooks_part = f" {FG_GRAY}hooks={RESET}{len(fiber.hooks)}" if fiber.hooks else ""
        props_part = f" {FG_GRAY}props={RESET}{_fmt_val(fiber.props)}"
        lines.append(
            f"{pad}{FG_GRAY}-{RESET} {FG_MAGENTA}{fiber.name}{RESET} "
            f"[{tag_col}]{hooks_part}{props_part}"
        )
    return lines


def render_tree(tree) -> None:
    """Pretty-print a fiber tree to stdout, one fiber per line."""
    for line in format_tree(tree):
        print(line)


# ----------------------------------------------------------------------------
# Render trace instrumentation
# ----------------------------------------------------------------------------

_TRACE_CURRENT: Optional[Dict[str, Any]] = None
_TRACE_ENABLED: bool = False

# recent traces, each a dict with an "events" list
_TRACE_LOG: List[Dict[str, Any]] = []
_TRACE_LOG_LIMIT = 50


def record_schedule(renderer: Any, reason: Optional[str] = None) -> None:
    if not _TRACE_ENABLED:
        return
    reasons: List[str] = getattr(renderer, "_debug_reasons", [])
    if reason:
        reasons.append(reason)
    setattr(renderer, "_debug_reasons", reasons)


def start_trace(renderer: Any, generation: int) -> None:
    global _TRACE_CURRENT
    if not _TRACE_ENABLED:
        return
    reasons = getattr(renderer, "_debug_reasons", [])
    setattr(renderer, "_debug_reasons", [])
    trace = {
        "id": f"tr-{int(time.time() * 1000)}-{generation}",
        "renderer_id": id(renderer),
        "generation": generation,
        "reasons": list(reasons),
        "ts": time.time(),
        "events": [],
    }
    _TRACE_LOG.append(trace)
    if len(_TRACE_LOG) > _TRACE_LOG_LIMIT:
        del _TRACE_LOG[:-_TRACE_LOG_LIMIT]
    _TRACE_CURRENT = trace


def end_trace(outcome: str = "committed") -> None:
    global _TRACE_CURRENT
    if _TRACE_CURRENT is not None:
        _TRACE_CURRENT["outcome"] = outcome
    _TRACE_CURRENT = None


def enter_render(fiber: Any, tree: Any) -> None:
    if not _TRACE_ENABLED or _TRACE_CURRENT is None:
        return
    tag = getattr(fiber.effect_tag, "value", str(fiber.effect_tag))
    _TRACE_CURRENT["events"].append(
        {
            "t": time.time(),
            "kind": "mount" if tag == "placement" else "update",
            "depth": tree.depth_of(fiber),
            "fiber": fiber.index,
            "name": fiber.name,
        }
    )


def last_trace() -> Optional[Dict[str, Any]]:
    return _TRACE_LOG[-1] if _TRACE_LOG else None


def print_last_trace() -> None:
    trace = last_trace()
    if trace is None:
        print(f"{FG_GRAY}[debug]{RESET} no render trace available yet.")
        return
    print(f"\n{BOLD}{FG_CYAN}=== Render Trace ==={RESET}")
    print(f"{FG_GRAY}generation:{RESET} {FG_YELLOW}{trace['generation']}{RESET}")
    if trace["reasons"]:
        print(f"{FG_GRAY}reasons:{RESET} {FG_YELLOW}{trace['reasons']}{RESET}")
    if "outcome" in trace:
        print(f"{FG_GRAY}outcome:{RESET} {trace['outcome']}")
    for ev in trace["events"]:
        pad = "  " * int(ev.get("depth", 0))
        print(f"{pad}- {ev.get('kind', '?')}: {ev.get('name', '?')}")
    print(f"{BOLD}{FG_CYAN}===================={RESET}\n")


def enable_tracing() -> None:
    global _TRACE_ENABLED
    _TRACE_ENABLED = True


def disable_tracing() -> None:
    global _TRACE_ENABLED
    _TRACE_ENABLED = False


def is_tracing_enabled() -> bool:
    return _TRACE_ENABLED


def clear_traces() -> None:
    del _TRACE_LOG[:]
