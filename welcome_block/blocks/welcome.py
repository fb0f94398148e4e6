"""
Bloc Welcome : message de bienvenue, date de dernière connexion et lien
vers le profil, affiché aux seuls utilisateurs authentifiés.
"""
import time
from typing import Any, Callable, Dict, List

from ..core.cache import merge_contexts
from ..core.dates import DateFormatter
from ..core.entity import EntityTypeManager
from ..core.forms import FormField, FormSpec, FormAttachments, FormState, StateCondition
from ..core.links import Link, Url
from ..core.session import AccountProxy
from ..models import (
    BlockBuild, BlockConfiguration, CacheMetadata, CUSTOM_FORMAT, DateFormatOption, RenderViewModel,
)
from .base import BlockPlugin

PHP_DATE_MANUAL = "https://www.php.net/manual/datetime.format.php#refsect1-datetime.format-parameters"
DATE_PREVIEW_LIBRARY = "/static/date_preview.js"


class WelcomeBlock(BlockPlugin):

    def __init__(self, configuration: Dict[str, Any], plugin_id: str, plugin_definition: Dict[str, Any],
                 current_user: AccountProxy, date_formatter: DateFormatter,
                 entity_type_manager: EntityTypeManager, clock: Callable[[], float] = time.time):
        self.current_user = current_user
        self.date_formatter = date_formatter
        self.entity_type_manager = entity_type_manager
        self.clock = clock
        super().__init__(configuration, plugin_id, plugin_definition)

    @classmethod
    def create(cls, services, configuration, plugin_id, plugin_definition):
        return cls(
            configuration,
            plugin_id,
            plugin_definition,
            services.current_user,
            services.date_formatter,
            services.entity_type_manager,
            services.clock,
        )

    def block_access(self, account) -> bool:
        return account.is_authenticated()

    def can_view(self, account) -> bool:
        return self.access(account)

    def default_configuration(self) -> Dict[str, Any]:
        defaults = BlockConfiguration()
        return {
            "welcome_message":    self.t(defaults.welcome_message),
            "date_format":        defaults.date_format,
            "date_format_custom": defaults.date_format_custom,
        }

    # ── Formulaire admin ───────────────────────────────────────────────────

    def date_format_options(self) -> List[DateFormatOption]:
        """Un choix par format du catalogue, avec un exemple calculé sur l'heure courante."""
        storage = self.entity_type_manager.get_storage("date_format")
        formats = storage.get_query().execute()
        now = self.clock()
        return [
            DateFormatOption(id=fid, label=fmt.label, example=self.date_formatter.format(now, fid))
            for fid, fmt in storage.load_multiple(list(formats)).items()
        ]

    def build_form(self) -> FormSpec:
        options = {opt.id: opt.option_label for opt in self.date_format_options()}
        options[CUSTOM_FORMAT] = self.t("Custom")
        collection_url = Url.from_route("entity.date_format.collection").to_string()
        is_custom = StateCondition(field="date_format", value=CUSTOM_FORMAT)

        fields = [
            FormField(
                name="welcome_message",
                type="textarea",
                title=self.t("Welcome Message"),
                default_value=self.configuration["welcome_message"],
            ),
            FormField(
                name="date_format",
                type="select",
                title=self.t("Date Format"),
                description=self.t(
                    "Select a date format to display the user's last logged in date in. "
                    "You can manage the stored date and time formats <a href=:url>here</a>.",
                    {":url": collection_url},
                ),
                options=options,
                default_value=self.configuration["date_format"],
                required=True,
            ),
            FormField(
                name="date_format_custom",
                type="textfield",
                title=self.t("Custom Date-Time Format"),
                description=self.t(
                    'A user-defined date format. See the <a href=":manual">PHP manual</a> for available options.',
                    {":manual": PHP_DATE_MANUAL},
                ),
                default_value=self.configuration["date_format_custom"],
                attributes={"data-date-formatter": "source"},
                field_suffix=(
                    ' <small class="js-hide" data-date-formatter="preview">'
                    + self.t("Displayed as %date_format", {"%date_format": ""})
                    + "</small>"
                ),
                states={"visible": is_custom, "required": is_custom},
            ),
        ]
        attached = FormAttachments(
            settings={"dateFormats": self.date_formatter.get_sample_date_formats(self.clock())},
            libraries=[DATE_PREVIEW_LIBRARY],
        )
        return FormSpec(fields=fields, attached=attached)

    def validate_form(self, form_state: FormState):
        # Pattern libre vidé si l'admin a finalement choisi un format nommé
        if form_state.get_value("date_format") != CUSTOM_FORMAT:
            form_state.set_value("date_format_custom", "")

    def on_submit(self, form_state: FormState):
        self.configuration["welcome_message"] = form_state.get_value("welcome_message")
        self.configuration["date_format"] = form_state.get_value("date_format")
        self.configuration["date_format_custom"] = form_state.get_value("date_format_custom")

    # ── Rendu ──────────────────────────────────────────────────────────────

    def render(self) -> RenderViewModel:
        username = self.current_user.get_account_name()
        last_login = self.current_user.get_last_accessed_time()
        chosen = self.configuration["date_format"]
        custom = self.configuration["date_format_custom"] if chosen == CUSTOM_FORMAT else ""
        link = Link.create_from_route(
            self.t("Visit your profile"),
            "entity.user.canonical",
            {"user": self.current_user.id()},
        )
        return RenderViewModel(
            welcome_message=self.configuration["welcome_message"],
            username=username,
            last_login_date=self.date_formatter.format(last_login, chosen, custom),
            link=link.to_renderable(),
        )

    def build(self) -> BlockBuild:
        return BlockBuild(
            theme="welcome_message",
            variables=self.render(),
            cache=CacheMetadata(
                contexts=self.get_cache_contexts(),
                tags=self.get_cache_tags(),
                max_age=self.get_cache_max_age(),
            ),
        )

    def get_cache_contexts(self) -> List[str]:
        return merge_contexts(super().get_cache_contexts(), ["user"])
