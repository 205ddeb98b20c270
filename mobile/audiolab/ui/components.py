"""Reusable Kivy components for the AudioLab client."""

from __future__ import annotations

from kivy.factory import Factory
from kivy.lang import Builder
from kivy.properties import NumericProperty, StringProperty
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.card import MDCard


class InfoBannerCard(MDCard):
    """MDCard wrapper that exposes a message prop for KV templates."""

    message = StringProperty("")


class SampleRow(MDBoxLayout):
    """One stored sample with play and delete actions."""

    bucket = StringProperty("")
    index = NumericProperty(0)
    filename = StringProperty("")
    caption = StringProperty("")


Factory.register("InfoBannerCard", cls=InfoBannerCard)
Factory.register("SampleRow", cls=SampleRow)

COMPONENT_KV = """
<LabScaffold@MDBoxLayout>:
    orientation: "vertical"
    padding: app.theme.spacing.toolbar, 0, app.theme.spacing.toolbar, app.theme.spacing.toolbar
    canvas.before:
        Color:
            rgba: app.theme.palette.background
        Rectangle:
            pos: self.pos
            size: self.size

<LabToolbar@MDTopAppBar>:
    md_bg_color: 0, 0, 0, 0
    specific_text_color: app.theme.palette.text_primary
    elevation: 0
    left_action_items: []
    right_action_items: []
    anchor_title: "left"

<LabCard@MDCard>:
    orientation: "vertical"
    size_hint_y: None
    adaptive_height: True
    padding: app.theme.spacing.card_padding
    spacing: app.theme.spacing.grid
    radius: [22]
    md_bg_color: app.theme.palette.card
    line_color: 0, 0, 0, 0

<SectionHeading@MDLabel>:
    font_style: app.theme.typography.title
    theme_text_color: "Custom"
    text_color: app.theme.palette.text_primary
    bold: True
    size_hint_y: None
    height: self.texture_size[1]

<BodyText@MDLabel>:
    font_style: app.theme.typography.body
    theme_text_color: "Custom"
    text_color: app.theme.palette.text_secondary
    size_hint_y: None
    height: self.texture_size[1]

<PrimaryButton@MDFillRoundFlatIconButton>:
    size_hint_y: None
    height: "50dp"
    md_bg_color: app.theme.palette.accent
    text_color: app.theme.palette.text_primary
    icon_color: app.theme.palette.text_primary

<SecondaryButton@MDFillRoundFlatIconButton>:
    size_hint_y: None
    height: "50dp"
    md_bg_color: app.theme.palette.surface_alt
    text_color: app.theme.palette.text_primary
    icon_color: app.theme.palette.accent_muted
    line_color: app.theme.palette.outline

<DangerButton@MDFillRoundFlatIconButton>:
    size_hint_y: None
    height: "50dp"
    md_bg_color: app.theme.palette.danger
    text_color: app.theme.palette.text_primary
    icon_color: app.theme.palette.text_primary

<RoundedInput@MDTextField>:
    mode: "rectangle"
    helper_text_mode: "on_focus"
    size_hint_y: None
    height: "72dp"

<DurationPicker@MDBoxLayout>:
    orientation: "vertical"
    size_hint_y: None
    height: "72dp"
    MDLabel:
        text: "Duração da gravação: {} segundos".format(int(app.record_duration))
        theme_text_color: "Custom"
        text_color: app.theme.palette.text_secondary
        font_style: app.theme.typography.caption
    MDSlider:
        min: app.duration_choices[0]
        max: app.duration_choices[-1]
        step: 5
        value: app.record_duration
        on_value: app.set_record_duration(self.value)

<SampleRow>:
    orientation: "horizontal"
    size_hint_y: None
    height: "56dp"
    spacing: app.theme.spacing.grid
    MDBoxLayout:
        orientation: "vertical"
        MDLabel:
            text: root.filename
            theme_text_color: "Custom"
            text_color: app.theme.palette.text_primary
            font_style: app.theme.typography.body
        MDLabel:
            text: root.caption
            theme_text_color: "Custom"
            text_color: app.theme.palette.text_muted
            font_style: app.theme.typography.caption
    MDIconButton:
        icon: "play"
        theme_text_color: "Custom"
        text_color: app.theme.palette.accent_muted
        on_release: app.play_sample(root.bucket, int(root.index))
    MDIconButton:
        icon: "trash-can-outline"
        theme_text_color: "Custom"
        text_color: app.theme.palette.danger
        on_release: app.delete_sample(root.bucket, int(root.index))

<InfoBanner@InfoBannerCard>:
    size_hint_y: None
    adaptive_height: True
    padding: app.theme.spacing.grid
    spacing: app.theme.spacing.grid
    md_bg_color: app.theme.palette.surface_alt
    line_color: 0, 0, 0, 0
    radius: [20]
    MDIcon:
        icon: "information-outline"
        theme_text_color: "Custom"
        text_color: app.theme.palette.accent_muted
    MDLabel:
        text: root.message
        theme_text_color: "Custom"
        text_color: app.theme.palette.text_secondary
        font_style: app.theme.typography.body
        text_size: self.width, None
        size_hint_y: None
        height: self.texture_size[1]

<ActivityLog@MDCard>:
    orientation: "vertical"
    size_hint_y: None
    adaptive_height: True
    padding: app.theme.spacing.card_padding
    radius: [22]
    md_bg_color: app.theme.palette.surface
    line_color: 0, 0, 0, 0
    spacing: app.theme.spacing.grid
    SectionHeading:
        text: "Registro"
    MDLabel:
        text: '\\n'.join(app.log_lines[-8:])
        theme_text_color: "Custom"
        text_color: app.theme.palette.text_secondary
        font_style: app.theme.typography.caption
        text_size: self.width, None
        size_hint_y: None
        height: self.texture_size[1]
"""


def load_components() -> None:
    """Register shared KV component templates."""
    Builder.load_string(COMPONENT_KV)


__all__ = ["load_components", "SampleRow"]
