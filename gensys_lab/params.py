"""
Parameter Descriptors

Each process declares its tunable parameters as an ordered tuple of
ParamDescriptor entries. The control panel reflects them into widgets;
the process alone holds the current values.
"""

import enum
from dataclasses import dataclass
from typing import Any, Optional


class ParamKind(enum.Enum):
    SLIDER = "slider"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    TEXT = "text"
    TEXTAREA = "textarea"
    BUTTON = "button"


NUMERIC_KINDS = (ParamKind.SLIDER, ParamKind.NUMBER)
TEXT_KINDS = (ParamKind.TEXT, ParamKind.TEXTAREA)


@dataclass(frozen=True)
class ParamDescriptor:
    """Static declaration of one process parameter.

    min/max/step apply to numeric kinds, rows to TEXTAREA and
    button_text to BUTTON. resets marks parameters whose new value only
    takes effect after the process is reset.
    """

    key: str
    label: str
    kind: ParamKind
    default: Any = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    rows: int = 3
    button_text: str = "Trigger"
    fmt: str = ".2f"
    tooltip: str = ""
    resets: bool = False

    @property
    def is_numeric(self):
        return self.kind in NUMERIC_KINDS

    @property
    def integral(self):
        """True when values snap to whole numbers."""
        return self.step is not None and float(self.step).is_integer()


def slider(key, label, min_val, max_val, default, step=None, fmt=".2f", **kw):
    return ParamDescriptor(key, label, ParamKind.SLIDER, default=default,
                           min=min_val, max=max_val, step=step, fmt=fmt, **kw)


def number(key, label, default, min_val=None, max_val=None, step=1, **kw):
    return ParamDescriptor(key, label, ParamKind.NUMBER, default=default,
                           min=min_val, max=max_val, step=step, fmt=".0f", **kw)


def checkbox(key, label, default=False, **kw):
    return ParamDescriptor(key, label, ParamKind.CHECKBOX, default=bool(default), **kw)


def text(key, label, default="", **kw):
    return ParamDescriptor(key, label, ParamKind.TEXT, default=default, **kw)


def textarea(key, label, default="", rows=3, **kw):
    return ParamDescriptor(key, label, ParamKind.TEXTAREA, default=default,
                           rows=rows, **kw)


def button(key, label, button_text="Trigger", **kw):
    return ParamDescriptor(key, label, ParamKind.BUTTON, button_text=button_text, **kw)


def coerce_value(desc, value):
    """Convert a raw widget value for desc.

    Returns (ok, value). Malformed numeric input is rejected rather than
    raised; out-of-range numbers are clamped.
    """
    if desc.kind is ParamKind.BUTTON:
        return False, None
    if desc.kind is ParamKind.CHECKBOX:
        return True, bool(value)
    if desc.kind in TEXT_KINDS:
        return True, "" if value is None else str(value)

    try:
        val = float(value)
    except (TypeError, ValueError):
        return False, None
    if val != val:  # NaN
        return False, None
    if desc.min is not None:
        val = max(desc.min, val)
    if desc.max is not None:
        val = min(desc.max, val)
    if desc.integral:
        val = int(round(val))
    return True, val
