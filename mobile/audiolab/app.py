"""Kivy entrypoint for the AudioLab mobile client."""

from __future__ import annotations

import re
import threading
from pathlib import Path
from typing import Callable

from kivy.clock import Clock
from kivy.factory import Factory
from kivy.lang import Builder
from kivy.properties import BooleanProperty, ListProperty, NumericProperty, ObjectProperty, StringProperty
from kivy.uix.screenmanager import ScreenManager
from kivymd.app import MDApp
from kivymd.uix.button import MDFlatButton
from kivymd.uix.dialog import MDDialog
from kivymd.uix.screen import MDScreen
from kivymd.uix.snackbar import Snackbar

from .audio.recorder import AudioRecorder
from .config import CONFIG
from .services.live import LiveClassifier, LiveSnapshot, LiveState
from .services.logger import LogBuffer, configure_logging
from .services.network import ApiError, ClassifierClient
from .services.session import NetworkSession
from .services.trainer import TrainingOrchestrator
from .store.sample_store import CLASS0, CLASS1, CLASSIFY, SampleStore
from .store.settings_store import NetworkNameSlot, SettingsStore
from .ui.components import load_components
from .ui.theme import LabTheme


SCREENS_KV = """
ScreenManager:
    LabScreen:
        name: "lab"
    SamplesScreen:
        name: "samples"
    ClassifyScreen:
        name: "classify"
    LiveScreen:
        name: "live"

<LabScreen@MDScreen>:
    LabScaffold:
        spacing: app.theme.spacing.section
        LabToolbar:
            title: "Laboratório IA"
            right_action_items: [["radio-tower", lambda x: app.switch_screen('live')]]
        ScrollView:
            do_scroll_x: False
            MDBoxLayout:
                orientation: "vertical"
                spacing: app.theme.spacing.section
                size_hint_y: None
                height: self.minimum_height
                LabCard:
                    SectionHeading:
                        text: "Rede neural"
                    RoundedInput:
                        id: name_input
                        text: app.network_name
                        hint_text: "Nome da Rede Neural"
                    PrimaryButton:
                        text: "Iniciar"
                        icon: "play-circle-outline"
                        on_press: app.init_network(name_input.text)
                    SecondaryButton:
                        text: "Salvar"
                        icon: "content-save"
                        on_press: app.save_network(name_input.text)
                    DangerButton:
                        text: "Limpar"
                        icon: "trash-can-outline"
                        on_press: app.confirm_clear()
                LabCard:
                    SectionHeading:
                        text: "Ações"
                    SecondaryButton:
                        text: "Treinar ({} / {})".format(app.class0_count, app.class1_count)
                        icon: "school-outline"
                        on_press: app.switch_screen('samples')
                    SecondaryButton:
                        text: "Classificar"
                        icon: "waveform"
                        on_press: app.switch_screen('classify')
                    SecondaryButton:
                        text: "Classificação ao vivo"
                        icon: "radio-tower"
                        on_press: app.switch_screen('live')
                LabCard:
                    SectionHeading:
                        text: "Servidor"
                    RoundedInput:
                        id: server_input
                        text: app.server_url
                        hint_text: "http://192.168.0.10:8080"
                    SecondaryButton:
                        text: "Salvar servidor"
                        icon: "server-network"
                        on_press: app.save_server_url(server_input.text)
                InfoBanner:
                    message: app.status_message
                ActivityLog:

<SamplesScreen@MDScreen>:
    LabScaffold:
        spacing: app.theme.spacing.section
        LabToolbar:
            title: "Registros Locais"
            left_action_items: [["arrow-left", lambda x: app.switch_screen('lab')]]
            right_action_items: [["cloud-upload", lambda x: app.train_all()]]
        ScrollView:
            do_scroll_x: False
            MDBoxLayout:
                orientation: "vertical"
                spacing: app.theme.spacing.section
                size_hint_y: None
                height: self.minimum_height
                LabCard:
                    SectionHeading:
                        text: "Classe 0"
                    MDBoxLayout:
                        id: class0_list
                        orientation: "vertical"
                        size_hint_y: None
                        height: self.minimum_height
                LabCard:
                    SectionHeading:
                        text: "Classe 1"
                    MDBoxLayout:
                        id: class1_list
                        orientation: "vertical"
                        size_hint_y: None
                        height: self.minimum_height
                LabCard:
                    DurationPicker:
                    MDBoxLayout:
                        size_hint_y: None
                        height: "60dp"
                        spacing: app.theme.spacing.grid
                        PrimaryButton:
                            text: "Gravar Classe 0"
                            icon: "record-circle" if app.recording_bucket == "class0" else "circle-outline"
                            disabled: app.is_recording
                            on_press: app.record_sample("class0")
                        PrimaryButton:
                            text: "Gravar Classe 1"
                            icon: "record-circle" if app.recording_bucket == "class1" else "circle-outline"
                            disabled: app.is_recording
                            on_press: app.record_sample("class1")
                    BodyText:
                        text: "Tempo Restante: {} segundos".format(int(app.remaining_time)) if app.is_recording else ""
                    PrimaryButton:
                        text: "Enviar Treinamentos"
                        icon: "cloud-upload"
                        disabled: app.is_training
                        on_press: app.train_all()
                InfoBanner:
                    message: app.training_result or "Grave amostras das duas classes e envie para treinar."

<ClassifyScreen@MDScreen>:
    LabScaffold:
        spacing: app.theme.spacing.section
        LabToolbar:
            title: "Classificar"
            left_action_items: [["arrow-left", lambda x: app.switch_screen('lab')]]
        MDBoxLayout:
            orientation: "vertical"
            spacing: app.theme.spacing.section
            LabCard:
                DurationPicker:
                PrimaryButton:
                    text: "Parar" if app.is_recording else "Gravar"
                    icon: "stop" if app.is_recording else "microphone"
                    on_press: app.toggle_adhoc_recording()
                SecondaryButton:
                    text: "Ouvir"
                    icon: "play"
                    on_press: app.play_last_adhoc()
                SecondaryButton:
                    text: "Classificar gravação"
                    icon: "waveform"
                    on_press: app.classify_last()
                BodyText:
                    text: "Tempo Restante: {} segundos".format(int(app.remaining_time)) if app.is_recording else ""
            InfoBanner:
                message: app.classify_message

<LiveScreen@MDScreen>:
    canvas.before:
        Color:
            rgba: app.live_color
        Rectangle:
            pos: self.pos
            size: self.size
    MDBoxLayout:
        orientation: "vertical"
        padding: app.theme.spacing.card_padding
        spacing: app.theme.spacing.section
        LabToolbar:
            title: "Ao vivo"
            specific_text_color: app.theme.palette.text_on_result
            left_action_items: [["arrow-left", lambda x: app.leave_live()]]
        MDLabel:
            text: app.live_label
            halign: "center"
            font_style: app.theme.typography.hero
            theme_text_color: "Custom"
            text_color: app.theme.palette.text_on_result
        DangerButton:
            text: "Parar classificação" if app.live_running else "Iniciar classificação ao vivo"
            md_bg_color: app.theme.palette.danger if app.live_running else app.theme.palette.accent
            pos_hint: {"center_x": 0.5}
            on_press: app.toggle_live()
        MDLabel:
            text: app.live_error
            halign: "center"
            theme_text_color: "Custom"
            text_color: app.theme.palette.danger
"""


class LabScreen(MDScreen):
    pass


class SamplesScreen(MDScreen):
    pass


class ClassifyScreen(MDScreen):
    pass


class LiveScreen(MDScreen):
    pass


def html_to_text(content: str) -> str:
    stripped = re.sub(r"(?is)<(script|style).*?</\1>", "", content)
    stripped = re.sub(r"(?s)<[^>]+>", " ", stripped)
    return re.sub(r"\s+", " ", stripped).strip()


class AudioLabApp(MDApp):
    theme = ObjectProperty(LabTheme.default())
    network_name = StringProperty("")
    server_url = StringProperty("")
    status_message = StringProperty("")
    log_lines = ListProperty([])
    class0_count = NumericProperty(0)
    class1_count = NumericProperty(0)
    duration_choices = ListProperty(list(CONFIG.record_durations))
    record_duration = NumericProperty(CONFIG.record_durations[0])
    remaining_time = NumericProperty(0)
    is_recording = BooleanProperty(False)
    recording_bucket = StringProperty("")
    is_training = BooleanProperty(False)
    training_result = StringProperty("")
    classify_message = StringProperty("Grave um áudio e toque em classificar.")
    live_label = StringProperty("Categoria")
    live_color = ListProperty([1, 1, 1, 1])
    live_error = StringProperty("")
    live_running = BooleanProperty(False)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.theme = LabTheme.default()
        self._countdown = None
        self._dialog: MDDialog | None = None

    def build(self):
        configure_logging(CONFIG.log_level)
        load_components()
        Builder.load_string(SCREENS_KV)
        self.title = CONFIG.app_name
        self.theme_cls.theme_style = "Dark"
        self.theme_cls.primary_palette = "Blue"
        self.base_dir = Path(self.user_data_dir or Path.home() / ".audiolab")
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.logger = LogBuffer(CONFIG.log_history)
        self.settings_store = SettingsStore(self.base_dir / CONFIG.settings_file)
        self.name_slot = NetworkNameSlot(self.settings_store)
        self.store = SampleStore(self.base_dir / CONFIG.samples_dir, self.name_slot)
        self.client = ClassifierClient(self.settings_store)
        self.session = NetworkSession(self.client, self.name_slot, self.logger)
        self.trainer = TrainingOrchestrator(self.store, self.client, self.logger)
        self.recorder = AudioRecorder(self.logger)
        self.live = LiveClassifier(self.recorder, self.client, self.store, self.logger)
        self.live.subscribe(self._on_live_snapshot)
        self.network_name = self.session.last_saved() or ""
        self.server_url = self.settings_store.get().server_url or CONFIG.server_url
        return ScreenManager()

    def on_start(self):
        self.refresh_samples()
        Clock.schedule_interval(lambda dt: self._sync_log(), 1)

    def on_stop(self):
        self.live.stop()
        self.recorder.stop()
        self.client.close()

    def switch_screen(self, name: str):
        if self.root:
            self.root.current = name
            if name == "samples":
                self.refresh_samples()

    def _in_background(self, work: Callable[[], str], done: Callable[[str], None]) -> None:
        def worker():
            result = work()
            Clock.schedule_once(lambda dt: done(result), 0)

        threading.Thread(target=worker, daemon=True).start()

    def init_network(self, name: str):
        self.network_name = name

        def done(response: str):
            self.status_message = response
            self._show_snackbar(response)

        self._in_background(lambda: self.session.initialize(name), done)

    def save_network(self, name: str):
        self.network_name = name
        self.session.name = name

        def done(response: str):
            self.status_message = response
            self._show_snackbar(response)

        self._in_background(self.session.save, done)

    def save_server_url(self, url: str):
        self.settings_store.update(server_url=url.strip())
        self.server_url = self.settings_store.get().server_url or CONFIG.server_url
        self.logger.add(f"Server set to {self.server_url}")
        self._show_snackbar("Servidor salvo")

    def confirm_clear(self):
        if self._dialog:
            self._dialog.dismiss()
        self._dialog = MDDialog(
            title="Confirmação",
            text="Tem certeza de que deseja limpar todos os arquivos?",
            buttons=[
                MDFlatButton(text="Cancelar", on_release=lambda *_: self._dialog.dismiss()),
                MDFlatButton(text="Limpar", on_release=lambda *_: self.clear_all()),
            ],
        )
        self._dialog.open()

    def clear_all(self):
        if self._dialog:
            self._dialog.dismiss()
        self.live.stop()
        try:
            self.store.delete_all()
        except OSError as exc:
            self.logger.error(f"Failed to delete files: {exc}")
            self.status_message = f"Erro ao limpar arquivos: {exc}"
            return
        self.session.forget()
        self.network_name = ""
        self.status_message = "Todos os arquivos foram deletados."
        self.refresh_samples()

    def set_record_duration(self, value: float):
        choices = self.duration_choices
        self.record_duration = min(choices, key=lambda choice: abs(choice - value))

    def record_sample(self, bucket: str):
        if self.is_recording:
            return
        path = self.store.new_sample_path(bucket)
        self._start_capture(path, bucket)

    def toggle_adhoc_recording(self):
        if self.is_recording:
            self.recorder.stop()
            return
        self._start_capture(self.store.new_sample_path(CLASSIFY), CLASSIFY)

    def _start_capture(self, path: Path, bucket: str):
        started = self.recorder.start(path, float(self.record_duration), self._on_capture_done)
        if not started:
            self._show_snackbar("Gravador ocupado")
            return
        self.is_recording = True
        self.recording_bucket = bucket
        self.remaining_time = self.record_duration
        self._countdown = Clock.schedule_interval(self._tick, 1)

    def _tick(self, _dt):
        if self.remaining_time > 0:
            self.remaining_time -= 1

    def _on_capture_done(self, path: Path, ok: bool) -> None:
        def _apply(_dt):
            if self._countdown:
                self._countdown.cancel()
                self._countdown = None
            self.is_recording = False
            self.recording_bucket = ""
            self.remaining_time = 0
            if not ok:
                self._show_snackbar("Gravação interrompida")
            self.refresh_samples()

        Clock.schedule_once(_apply, 0)

    def refresh_samples(self):
        self.class0_count = self.store.count(CLASS0)
        self.class1_count = self.store.count(CLASS1)
        if not self.root or not self.root.has_screen("samples"):
            return
        screen = self.root.get_screen("samples")
        for bucket in (CLASS0, CLASS1):
            container = screen.ids[f"{bucket}_list"]
            container.clear_widgets()
            for index, sample in enumerate(self.store.list_samples(bucket)):
                try:
                    caption = f"Duração: {sample.duration_seconds:.1f} segundos"
                except RuntimeError:
                    caption = "Duração indisponível"
                container.add_widget(
                    Factory.SampleRow(bucket=bucket, index=index, filename=sample.name, caption=caption)
                )

    def play_sample(self, bucket: str, index: int):
        samples = self.store.list_samples(bucket)
        if 0 <= index < len(samples):
            self.recorder.play(samples[index].path)

    def delete_sample(self, bucket: str, index: int):
        try:
            sample = self.store.delete_sample(bucket, index)
        except (IndexError, OSError) as exc:
            self.logger.error(f"Erro ao deletar arquivo: {exc}")
            self._show_snackbar("Erro ao deletar arquivo")
        else:
            self.logger.add(f"Deleted {sample.name}")
        self.refresh_samples()

    def train_all(self):
        if self.is_training:
            return
        self.is_training = True
        self.training_result = "Enviando treinamentos..."

        def done(response: str):
            self.is_training = False
            if "<html" in response.lower():
                response = html_to_text(response)
            self.training_result = response or "Erro desconhecido"
            self._show_snackbar(self.training_result[:80])
            self.refresh_samples()

        self._in_background(self.trainer.train_all, done)

    def play_last_adhoc(self):
        sample = self.store.most_recent(CLASSIFY)
        if sample:
            self.recorder.play(sample.path)

    def classify_last(self):
        sample = self.store.most_recent(CLASSIFY)
        if not sample:
            self.classify_message = "Nenhuma gravação para classificar."
            return

        def work() -> str:
            try:
                result = self.client.classify(sample)
            except ApiError as exc:
                return f"Erro: {exc}"
            return f"Classificação: classe {result.class_label} ({result.confidence:.0%})"

        def done(message: str):
            self.classify_message = message

        self._in_background(work, done)

    def toggle_live(self):
        if self.live.snapshot.active:
            self.live.stop()
        else:
            self.live.start()

    def leave_live(self):
        self.live.stop()
        self.switch_screen("lab")

    def _on_live_snapshot(self, snapshot: LiveSnapshot) -> None:
        def _apply(_dt):
            self.live_running = snapshot.active
            self.live_label = snapshot.label
            self.live_color = list(self.theme.palette.result_color(snapshot.color))
            if snapshot.state is LiveState.FAILED:
                self.live_error = snapshot.error or ""
            elif snapshot.state is LiveState.RECORDING and snapshot.cycles == 0:
                self.live_error = ""

        Clock.schedule_once(_apply, 0)

    def _sync_log(self):
        self.log_lines = self.logger.get()

    def _show_snackbar(self, text: str) -> None:
        def _display(*_):
            Snackbar(
                text=text,
                duration=1.8,
                bg_color=self.theme.palette.surface_alt,
            ).open()

        Clock.schedule_once(_display, 0)


if __name__ == "__main__":
    AudioLabApp().run()
