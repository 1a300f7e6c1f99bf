"""
Parameter panel builder.

Turns a process's parameter descriptors into widgets on a ControlPanel.
Value edits go to on_change(key, value); button descriptors go to
on_action(key).
"""

from .params import ParamKind

NO_PARAMETERS = "No adjustable parameters"


def build_param_controls(panel, process, on_change, on_action):
    """Append one widget per descriptor. Returns the widgets keyed by param key."""
    descriptors = process.get_parameters() if process is not None else ()
    if not descriptors:
        panel.add_label(NO_PARAMETERS)
        return {}

    widgets = {}
    for desc in descriptors:
        key = desc.key
        value = process.get_param_value(key)
        if value is None:
            value = desc.default

        def changed(v, key=key):
            on_change(key, v)

        if desc.kind is ParamKind.SLIDER:
            widget = panel.add_slider(
                desc.label, desc.min, desc.max, value,
                fmt=desc.fmt, step=desc.step, on_change=changed)
        elif desc.kind is ParamKind.NUMBER:
            widget = panel.add_stepper(
                desc.label, value, step=desc.step, min_val=desc.min,
                max_val=desc.max, fmt=desc.fmt,
                on_change=changed)
        elif desc.kind is ParamKind.CHECKBOX:
            widget = panel.add_toggle(desc.label, bool(value), on_change=changed)
        elif desc.kind is ParamKind.TEXT:
            widget = panel.add_textbox(desc.label, value, rows=1, on_commit=changed)
        elif desc.kind is ParamKind.TEXTAREA:
            widget = panel.add_textbox(desc.label, value, rows=desc.rows, on_commit=changed)
        elif desc.kind is ParamKind.BUTTON:
            widget = panel.add_button(desc.button_text or desc.label,
                                      on_click=lambda key=key: on_action(key))
        else:
            continue
        widgets[key] = widget
    return widgets
