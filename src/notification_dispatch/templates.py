"""Localized message templates and placeholder rendering.

Templates use ``{{name}}`` placeholders, where ``name`` is made of word
characters. Only that exact token form is substituted; all other text,
including braces, ``{% ... %}`` and ``{{ spaced }}`` forms, passes through
unchanged. A placeholder with no matching variable is kept in the output
verbatim, so missing data shows up in the message instead of disappearing.
"""

import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from notification_dispatch.enums import Channel, Language, NotificationType
from notification_dispatch.errors import TemplateNotFoundError

TemplateKey = tuple[NotificationType, Language, Channel]

PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def render_template(template_str: str, variables: Mapping[str, str]) -> str:
    """Substitute ``{{name}}`` placeholders in *template_str*.

    Values are converted to strings and inserted as-is; they are never
    scanned for placeholders themselves. Unknown placeholders are left
    as-is.
    """

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in variables:
            return match.group(0)
        return str(variables[name])

    return PLACEHOLDER_RE.sub(_substitute, template_str)


@dataclass(frozen=True, slots=True)
class Template:
    """A message skeleton; ``subject`` is only set for email."""

    body: str
    subject: str | None = None


@dataclass(frozen=True, slots=True)
class RenderedContent:
    body: str
    subject: str | None = None


class TemplateCatalog:
    """Read-only lookup of templates keyed by (type, language, channel)."""

    def __init__(self, templates: Mapping[TemplateKey, Template]) -> None:
        self._templates: Mapping[TemplateKey, Template] = MappingProxyType(
            dict(templates)
        )

    def __iter__(self) -> Iterator[TemplateKey]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def get(
        self, notification_type: str, language: str, channel: str
    ) -> Template:
        """Return the template for an exact key.

        Raises TemplateNotFoundError if the combination is not registered.
        """
        try:
            return self._templates[(notification_type, language, channel)]  # type: ignore[index]
        except KeyError:
            raise TemplateNotFoundError(notification_type, language, channel) from None

    def render(
        self,
        notification_type: str,
        language: str,
        channel: str,
        variables: Mapping[str, str],
    ) -> RenderedContent:
        template = self.get(notification_type, language, channel)
        subject = (
            render_template(template.subject, variables)
            if template.subject is not None
            else None
        )
        return RenderedContent(
            body=render_template(template.body, variables),
            subject=subject,
        )


_T = NotificationType
_L = Language
_C = Channel

DEFAULT_TEMPLATES: Mapping[TemplateKey, Template] = MappingProxyType({
    # --- otp ---
    (_T.OTP, _L.EN, _C.EMAIL): Template(
        subject="Your verification code",
        body=(
            "Hello,\n\n"
            "Your one-time code is: {{code}}\n\n"
            "This code expires in {{expiry}} minutes.\n"
            "Do NOT share it with anyone.\n\n"
            "If you did not request this, ignore this message."
        ),
    ),
    (_T.OTP, _L.EN, _C.SMS): Template(
        body="Your code: {{code}}. Expires in {{expiry}} min. Do not share.",
    ),
    (_T.OTP, _L.EN, _C.PUSH): Template(
        body="Tap to copy your code: {{code}} (expires in {{expiry}} min)",
    ),
    (_T.OTP, _L.ES, _C.EMAIL): Template(
        subject="Tu código de verificación",
        body=(
            "Hola,\n\n"
            "Tu código de un solo uso es: {{code}}\n\n"
            "Este código expira en {{expiry}} minutos.\n"
            "NO lo compartas con nadie.\n\n"
            "Si no solicitaste esto, ignora este mensaje."
        ),
    ),
    (_T.OTP, _L.ES, _C.SMS): Template(
        body="Tu código: {{code}}. Expira en {{expiry}} min. No lo compartas.",
    ),
    (_T.OTP, _L.ES, _C.PUSH): Template(
        body="Toca para copiar tu código: {{code}} (expira en {{expiry}} min)",
    ),
    # --- alert ---
    (_T.ALERT, _L.EN, _C.EMAIL): Template(
        subject="Alert: {{title}}",
        body=(
            "ALERT [{{severity}}]\n\n"
            "{{title}}\n\n"
            "{{message}}\n\n"
            "This is an automated notification."
        ),
    ),
    (_T.ALERT, _L.EN, _C.SMS): Template(
        body="[{{severity}}] {{title}}: {{message}}",
    ),
    (_T.ALERT, _L.EN, _C.PUSH): Template(
        body="{{title}} — {{message}}",
    ),
    (_T.ALERT, _L.ES, _C.EMAIL): Template(
        subject="Alerta: {{title}}",
        body=(
            "ALERTA [{{severity}}]\n\n"
            "{{title}}\n\n"
            "{{message}}\n\n"
            "Esta es una notificación automática."
        ),
    ),
    (_T.ALERT, _L.ES, _C.SMS): Template(
        body="[{{severity}}] {{title}}: {{message}}",
    ),
    (_T.ALERT, _L.ES, _C.PUSH): Template(
        body="{{title}} — {{message}}",
    ),
    # --- marketing ---
    (_T.MARKETING, _L.EN, _C.EMAIL): Template(
        subject="\U0001F389 Special offer for you, {{firstName}}!",
        body=(
            "Hi {{firstName}},\n\n"
            "We have an exclusive deal just for you:\n"
            "{{discount}}% OFF with code {{promoCode}}\n\n"
            "Don't miss it — limited time only!\n\n"
            "To unsubscribe reply STOP."
        ),
    ),
    (_T.MARKETING, _L.EN, _C.SMS): Template(
        body=(
            "Hi {{firstName}}! {{discount}}% OFF with code {{promoCode}}. "
            "Reply STOP to unsubscribe."
        ),
    ),
    (_T.MARKETING, _L.EN, _C.PUSH): Template(
        body="{{firstName}}, grab {{discount}}% off with {{promoCode}}! \U0001F389",
    ),
    (_T.MARKETING, _L.ES, _C.EMAIL): Template(
        subject="\U0001F389 ¡Oferta especial para ti, {{firstName}}!",
        body=(
            "Hola {{firstName}},\n\n"
            "Tenemos una oferta exclusiva para ti:\n"
            "{{discount}}% DE DESCUENTO con el código {{promoCode}}\n\n"
            "¡No te lo pierdas — solo por tiempo limitado!\n\n"
            "Para cancelar responde STOP."
        ),
    ),
    (_T.MARKETING, _L.ES, _C.SMS): Template(
        body=(
            "¡Hola {{firstName}}! {{discount}}% OFF con código {{promoCode}}. "
            "Responde STOP para cancelar."
        ),
    ),
    (_T.MARKETING, _L.ES, _C.PUSH): Template(
        body="{{firstName}}, ¡{{discount}}% de descuento con {{promoCode}}! \U0001F389",
    ),
    # --- receipt ---
    (_T.RECEIPT, _L.EN, _C.EMAIL): Template(
        subject="Your receipt for order #{{orderId}}",
        body=(
            "Thank you for your purchase!\n\n"
            "Order ID: {{orderId}}\n"
            "Date: {{date}}\n\n"
            "Items:\n"
            "{{items}}\n\n"
            "Total: {{amount}}\n\n"
            "We appreciate your business."
        ),
    ),
    (_T.RECEIPT, _L.EN, _C.SMS): Template(
        body="Receipt for order #{{orderId}}: {{amount}} on {{date}}.",
    ),
    (_T.RECEIPT, _L.EN, _C.PUSH): Template(
        body="Order #{{orderId}} confirmed. Total: {{amount}}",
    ),
    (_T.RECEIPT, _L.ES, _C.EMAIL): Template(
        subject="Tu recibo del pedido #{{orderId}}",
        body=(
            "¡Gracias por tu compra!\n\n"
            "ID de pedido: {{orderId}}\n"
            "Fecha: {{date}}\n\n"
            "Artículos:\n"
            "{{items}}\n\n"
            "Total: {{amount}}\n\n"
            "Apreciamos tu preferencia."
        ),
    ),
    (_T.RECEIPT, _L.ES, _C.SMS): Template(
        body="Recibo pedido #{{orderId}}: {{amount}} el {{date}}.",
    ),
    (_T.RECEIPT, _L.ES, _C.PUSH): Template(
        body="Pedido #{{orderId}} confirmado. Total: {{amount}}",
    ),
})

default_catalog = TemplateCatalog(DEFAULT_TEMPLATES)
