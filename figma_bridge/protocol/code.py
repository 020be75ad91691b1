"""Helpers for running Figma Plugin API snippets through `execute_code`."""

from __future__ import annotations

EXECUTE_CODE_COMMAND = "execute_code"

_ASYNC_PREFIXES = ("(async", "async")

_IIFE_TEMPLATE = """(async () => {{
  try {{
{body}
  }} catch (error) {{
    return {{
      success: false,
      error: error instanceof Error ? error.message : String(error)
    }};
  }}
}})();"""


def wrap_code(code: str) -> str:
    """Wrap plugin code in an async IIFE that turns thrown errors into a result.

    Code that already starts as an async function or IIFE is returned unchanged.
    """
    stripped = (code or "").strip()
    if not stripped:
        raise ValueError("code must be a non-empty string")
    if stripped.startswith(_ASYNC_PREFIXES):
        return code
    body = "\n".join("    " + line for line in code.split("\n"))
    return _IIFE_TEMPLATE.format(body=body)


__all__ = ["EXECUTE_CODE_COMMAND", "wrap_code"]
