"""
UI Controls for the Lab Viewer

Minimal, dark-themed widgets drawn directly with pygame. Widgets keep
their own layout in panel-local coordinates; ControlPanel translates
window events and scrolls when the content is taller than the window.
"""

import pygame


# Theme colors
THEME = {
    "bg": (18, 18, 24),
    "panel": (25, 25, 35),
    "track": (50, 50, 65),
    "track_fill": (80, 140, 220),
    "handle": (200, 210, 230),
    "handle_active": (255, 255, 255),
    "text": (180, 185, 195),
    "text_bright": (230, 235, 245),
    "text_dim": (100, 105, 115),
    "text_error": (230, 110, 110),
    "button": (40, 42, 55),
    "button_hover": (55, 58, 75),
    "button_active": (70, 100, 180),
    "field": (32, 33, 44),
    "field_focus": (44, 46, 62),
    "divider": (40, 40, 55),
}


class Slider:
    """Horizontal slider with label and value display."""

    def __init__(self, x, y, width, label, min_val, max_val, value,
                 fmt=".2f", step=None, on_change=None):
        self.x = x
        self.y = y
        self.width = width
        self.height = 36
        self.label = label
        self.min_val = min_val
        self.max_val = max_val
        self.value = value
        self.fmt = fmt
        self.step = step
        self.on_change = on_change
        self.dragging = False
        self.hovered = False

        self.track_y = self.y + 22
        self.track_x = self.x + 8
        self.track_w = self.width - 16

    def _val_to_x(self, val):
        span = (self.max_val - self.min_val) or 1
        return self.track_x + (val - self.min_val) / span * self.track_w

    def _x_to_val(self, px):
        frac = max(0.0, min(1.0, (px - self.track_x) / self.track_w))
        val = self.min_val + frac * (self.max_val - self.min_val)
        if self.step:
            val = round(val / self.step) * self.step
        return val

    def _set_from_x(self, px):
        new_val = self._x_to_val(px)
        if new_val != self.value:
            self.value = new_val
            if self.on_change:
                self.on_change(self.value)

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            mx, my = event.pos
            if (self.track_x - 4 <= mx <= self.track_x + self.track_w + 4 and
                    abs(my - self.track_y) <= 12):
                self.dragging = True
                self._set_from_x(mx)
                return True

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging = False

        elif event.type == pygame.MOUSEMOTION:
            mx, my = event.pos
            self.hovered = (abs(mx - self._val_to_x(self.value)) < 12 and
                            abs(my - self.track_y) < 12)
            if self.dragging:
                self._set_from_x(mx)
                return True

        return False

    def set_value(self, val):
        self.value = max(self.min_val, min(self.max_val, val))

    def draw(self, surface, font):
        surface.blit(font.render(self.label, True, THEME["text"]), (self.x + 8, self.y + 2))
        val_surf = font.render(f"{self.value:{self.fmt}}", True, THEME["text_bright"])
        surface.blit(val_surf, (self.x + self.width - val_surf.get_width() - 8, self.y + 2))

        pygame.draw.rect(surface, THEME["track"],
                         pygame.Rect(self.track_x, self.track_y - 2, self.track_w, 4),
                         border_radius=2)
        hx = self._val_to_x(self.value)
        pygame.draw.rect(surface, THEME["track_fill"],
                         pygame.Rect(self.track_x, self.track_y - 2, hx - self.track_x, 4),
                         border_radius=2)

        color = THEME["handle_active"] if (self.dragging or self.hovered) else THEME["handle"]
        pygame.draw.circle(surface, color, (int(hx), self.track_y), 9 if self.dragging else 7)


class Button:
    """Clickable button with label."""

    def __init__(self, x, y, width, height, label, on_click=None, active=False):
        self.rect = pygame.Rect(x, y, width, height)
        self.height = height
        self.label = label
        self.on_click = on_click
        self.active = active
        self.hovered = False

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                if self.on_click:
                    self.on_click()
                return True
        elif event.type == pygame.MOUSEMOTION:
            self.hovered = self.rect.collidepoint(event.pos)
        return False

    def draw(self, surface, font):
        if self.active:
            color = THEME["button_active"]
        elif self.hovered:
            color = THEME["button_hover"]
        else:
            color = THEME["button"]
        pygame.draw.rect(surface, color, self.rect, border_radius=4)

        label_surf = font.render(self.label, True, THEME["text_bright"])
        surface.blit(label_surf, label_surf.get_rect(center=self.rect.center))


class ButtonRow:
    """Wrapping row of selectable buttons (radio-button behaviour)."""

    def __init__(self, x, y, width, labels, selected=0, on_select=None, btn_height=26):
        self.labels = list(labels)
        self.selected = selected
        self.on_select = on_select

        self.buttons = []
        padding = 4
        bx, by = x, y
        for label in self.labels:
            bw = max(len(label) * 8 + 16, 50)
            if bx + bw > x + width and bx > x:
                bx = x
                by += btn_height + padding
            self.buttons.append(Button(bx, by, bw, btn_height, label))
            bx += bw + padding

        self.height = by - y + btn_height
        self.update_active()

    def update_active(self):
        for i, btn in enumerate(self.buttons):
            btn.active = (i == self.selected)

    def select(self, idx):
        self.selected = idx
        self.update_active()

    def handle_event(self, event):
        for i, btn in enumerate(self.buttons):
            if btn.handle_event(event):
                self.select(i)
                if self.on_select:
                    self.on_select(i, self.labels[i])
                return True
        return False

    def draw(self, surface, font):
        for btn in self.buttons:
            btn.draw(surface, font)


class Toggle:
    """Checkbox with label."""

    def __init__(self, x, y, width, label, value=False, on_change=None):
        self.rect = pygame.Rect(x, y, width, 24)
        self.height = 24
        self.label = label
        self.value = bool(value)
        self.on_change = on_change

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.value = not self.value
                if self.on_change:
                    self.on_change(self.value)
                return True
        return False

    def draw(self, surface, font):
        box = pygame.Rect(self.rect.x, self.rect.y + 4, 16, 16)
        pygame.draw.rect(surface, THEME["field"], box, border_radius=3)
        if self.value:
            pygame.draw.rect(surface, THEME["track_fill"], box.inflate(-6, -6), border_radius=2)
        surface.blit(font.render(self.label, True, THEME["text"]), (box.right + 8, self.rect.y + 5))


class Stepper:
    """Numeric field with - / + buttons."""

    def __init__(self, x, y, width, label, value, step=1, min_val=None,
                 max_val=None, fmt=".0f", on_change=None):
        self.x = x
        self.y = y
        self.width = width
        self.height = 28
        self.label = label
        self.value = value
        self.step = step or 1
        self.min_val = min_val
        self.max_val = max_val
        self.fmt = fmt
        self.on_change = on_change
        self.minus = pygame.Rect(x + width - 92, y + 2, 24, 22)
        self.plus = pygame.Rect(x + width - 32, y + 2, 24, 22)

    def _clamp(self, val):
        if self.min_val is not None:
            val = max(self.min_val, val)
        if self.max_val is not None:
            val = min(self.max_val, val)
        return val

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for rect, direction in ((self.minus, -1), (self.plus, 1)):
                if rect.collidepoint(event.pos):
                    new_val = self._clamp(self.value + direction * self.step)
                    if new_val != self.value:
                        self.value = new_val
                        if self.on_change:
                            self.on_change(self.value)
                    return True
        return False

    def draw(self, surface, font):
        surface.blit(font.render(self.label, True, THEME["text"]), (self.x + 8, self.y + 6))
        for rect, sign in ((self.minus, "-"), (self.plus, "+")):
            pygame.draw.rect(surface, THEME["button"], rect, border_radius=4)
            glyph = font.render(sign, True, THEME["text_bright"])
            surface.blit(glyph, glyph.get_rect(center=rect.center))
        val_surf = font.render(f"{self.value:{self.fmt}}", True, THEME["text_bright"])
        mid = (self.minus.right + self.plus.left) // 2
        surface.blit(val_surf, val_surf.get_rect(center=(mid, self.minus.centery)))


class TextBox:
    """Editable text field, single or multi-line.

    Single-line boxes commit on Enter; every box commits when it loses
    focus (click elsewhere or Escape). Multi-line boxes insert a newline
    on Enter.
    """

    line_height = 16

    def __init__(self, x, y, width, label, value="", rows=1, on_commit=None):
        self.x = x
        self.y = y
        self.width = width
        self.rows = max(1, rows)
        self.label = label
        self.text = "" if value is None else str(value)
        self.on_commit = on_commit
        self.focused = False
        self.box = pygame.Rect(x + 8, y + 18, width - 16, self.rows * self.line_height + 8)
        self.height = self.box.bottom - y

    def commit(self):
        self.focused = False
        if self.on_commit:
            self.on_commit(self.text)

    def blur(self):
        if self.focused:
            self.commit()

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.box.collidepoint(event.pos):
                self.focused = True
                return True
            self.blur()
            return False

        if event.type == pygame.KEYDOWN and self.focused:
            if event.key == pygame.K_ESCAPE:
                self.commit()
            elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                if self.rows > 1:
                    self.text += "\n"
                else:
                    self.commit()
            elif event.key == pygame.K_BACKSPACE:
                self.text = self.text[:-1]
            elif event.unicode and event.unicode.isprintable():
                self.text += event.unicode
            return True
        return False

    def draw(self, surface, font):
        surface.blit(font.render(self.label, True, THEME["text"]), (self.x + 8, self.y + 2))
        pygame.draw.rect(surface, THEME["field_focus"] if self.focused else THEME["field"],
                         self.box, border_radius=3)
        lines = self.text.split("\n")[-self.rows:]
        if self.focused:
            lines[-1] += "_"
        for i, line in enumerate(lines):
            surface.blit(font.render(line, True, THEME["text_bright"]),
                         (self.box.x + 4, self.box.y + 4 + i * self.line_height))


class Label:
    """Static line of text."""

    def __init__(self, x, y, text, color="text_dim"):
        self.x = x
        self.y = y
        self.text = text
        self.color = color
        self.height = 20

    def draw(self, surface, font):
        surface.blit(font.render(self.text, True, THEME[self.color]), (self.x, self.y + 2))


class SectionHeader:
    """Section divider with title."""

    def __init__(self, x, y, width, title):
        self.x = x
        self.y = y
        self.width = width
        self.title = title
        self.height = 24

    def draw(self, surface, font):
        pygame.draw.line(surface, THEME["divider"],
                         (self.x + 8, self.y + 8), (self.x + self.width - 8, self.y + 8))
        surface.blit(font.render(self.title, True, THEME["text_dim"]), (self.x + 8, self.y + 12))


class ControlPanel:
    """
    Side panel containing all controls.
    Manages layout, scrolling, events and rendering for the widgets.
    """

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.widgets = []
        self.scroll_y = 0
        self._cursor_y = 8  # next free vertical position (content coordinates)

    @property
    def content_height(self):
        return self._cursor_y + 8

    def _place(self, widget, gap):
        self.widgets.append(widget)
        self._cursor_y += widget.height + gap
        return widget

    def add_section(self, title):
        return self._place(SectionHeader(0, self._cursor_y, self.width, title), 4)

    def add_slider(self, label, min_val, max_val, value, fmt=".2f",
                   step=None, on_change=None):
        return self._place(Slider(0, self._cursor_y, self.width, label, min_val,
                                  max_val, value, fmt, step, on_change), 6)

    def add_button_row(self, labels, selected=0, on_select=None):
        return self._place(ButtonRow(8, self._cursor_y, self.width - 16, labels,
                                     selected, on_select), 8)

    def add_button(self, label, on_click=None):
        return self._place(Button(8, self._cursor_y, self.width - 16, 28, label, on_click), 8)

    def add_button_group(self, entries):
        """One row of equal-width buttons from (label, on_click) pairs."""
        gap = 4
        bw = (self.width - 16 - gap * (len(entries) - 1)) // max(1, len(entries))
        buttons = []
        for i, (label, on_click) in enumerate(entries):
            btn = Button(8 + i * (bw + gap), self._cursor_y, bw, 28, label, on_click)
            self.widgets.append(btn)
            buttons.append(btn)
        self._cursor_y += 36
        return buttons

    def add_toggle(self, label, value=False, on_change=None):
        return self._place(Toggle(8, self._cursor_y, self.width - 16, label, value,
                                  on_change), 6)

    def add_stepper(self, label, value, step=1, min_val=None, max_val=None,
                    fmt=".0f", on_change=None):
        return self._place(Stepper(0, self._cursor_y, self.width, label, value, step,
                                   min_val, max_val, fmt, on_change), 6)

    def add_textbox(self, label, value="", rows=1, on_commit=None):
        return self._place(TextBox(0, self._cursor_y, self.width, label, value, rows,
                                   on_commit), 8)

    def add_label(self, text, color="text_dim"):
        return self._place(Label(8, self._cursor_y, text, color), 4)

    def add_spacer(self, height=8):
        self._cursor_y += height

    @property
    def has_focus(self):
        """True while a text box is taking keyboard input."""
        return any(getattr(w, "focused", False) for w in self.widgets)

    def blur(self):
        for widget in self.widgets:
            if hasattr(widget, "blur"):
                widget.blur()

    def scroll(self, dy):
        limit = max(0, self.content_height - self.height)
        self.scroll_y = max(0, min(limit, self.scroll_y - dy))

    def handle_event(self, event):
        """Process events, translating window coordinates to content coordinates."""
        if hasattr(event, "pos"):
            local = (event.pos[0] - self.x, event.pos[1] - self.y)
            if not (0 <= local[0] <= self.width and 0 <= local[1] <= self.height):
                if event.type == pygame.MOUSEBUTTONUP:
                    for widget in self.widgets:
                        if hasattr(widget, "dragging"):
                            widget.dragging = False
                elif event.type == pygame.MOUSEBUTTONDOWN:
                    self.blur()
                return False
            adjusted = pygame.event.Event(event.type, {
                **{k: v for k, v in event.__dict__.items() if k != "pos"},
                "pos": (local[0], local[1] + self.scroll_y),
            })
        else:
            adjusted = event

        # A button press moves focus away from a text box it did not land in
        if adjusted.type == pygame.MOUSEBUTTONDOWN and adjusted.button in (1, 2, 3):
            for widget in self.widgets:
                if getattr(widget, "focused", False) and not widget.box.collidepoint(adjusted.pos):
                    widget.blur()

        for widget in self.widgets:
            if hasattr(widget, "handle_event") and widget.handle_event(adjusted):
                return True
        return False

    def draw(self, target_surface, font):
        """Draw the visible part of the panel onto the target surface."""
        content = pygame.Surface((self.width, max(self.height, self.content_height)))
        content.fill(THEME["panel"])
        for widget in self.widgets:
            widget.draw(content, font)

        target_surface.blit(content, (self.x, self.y),
                            pygame.Rect(0, self.scroll_y, self.width, self.height))
        pygame.draw.line(target_surface, THEME["divider"],
                         (self.x, self.y), (self.x, self.y + self.height))
