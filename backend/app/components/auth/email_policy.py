"""Corporate email policy: rejects disposable and consumer-provider addresses."""

from __future__ import annotations

import re
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email


DISPOSABLE_EMAIL_DOMAINS = frozenset({
    "10mail.org", "10minutemail.com", "1secmail.com", "1secmail.net", "1secmail.org",
    "33mail.com", "abcmail.email", "altmails.com", "astimei.com", "burnermail.io",
    "discard.email", "discardmail.com", "disposableinbox.com", "dispostable.com",
    "dropmail.me", "dumpmail.de", "email-temp.com", "emailfake.com", "emailna.co",
    "emailondeck.com", "emlhub.com", "emlpro.com", "emltmp.com", "etempmail.net",
    "eyepaste.com", "fakeinbox.com", "fexpost.com", "freemail.ltd", "generator.email",
    "getairmail.com", "getnada.com", "guerrillamail.com", "harakirimail.com",
    "incognitomail.com", "inboxkitten.com", "jetable.org", "lroid.com", "mail-temp.com",
    "mailbox.in.ua", "mailcatch.com", "maildrop.cc", "mailforspam.com", "mailinator.com",
    "mailnesia.com", "mailsac.com", "mailto.plus", "meltmail.com", "minutemail.com",
    "moakt.cc", "moakt.co", "mohmal.com", "safemail.icu", "sharklasers.com",
    "spambog.com", "spambox.me", "spamgourmet.com", "spamherelots.com", "tafmail.com",
    "tempail.com", "temp-mail.org", "temp-mail.ru", "tempemail.net", "tempinbox.com",
    "tempinbox.me", "tempmail.com", "tempmail.dev", "tempmail.net", "tempmailo.com",
    "tempr.email", "throwawaymail.com", "tmpeml.com", "tmpmail.net", "tmpmail.org",
    "trash-mail.com", "trashmail.com", "trx365.com", "yopmail.com",
})

CONSUMER_EMAIL_DOMAINS = frozenset({
    "aol.com", "att.net", "comcast.net", "gmail.com", "gmx.com", "googlemail.com",
    "hotmail.com", "icloud.com", "inbox.com", "live.com", "mail.com", "mail.ru",
    "me.com", "msn.com", "outlook.com", "protonmail.com", "rocketmail.com",
    "tutanota.com", "verizon.net", "yahoo.co.jp", "yahoo.co.uk", "yahoo.com",
    "yahoo.com.br", "yahoo.es", "yahoo.fr", "yandex.com", "zoho.com",
})

# Naming patterns common to throwaway inbox services.
DISPOSABLE_DOMAIN_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"temp(mail|box|io|inbo|email|o|e|)",
        r"mail(inator|drop|temp|fake|box)",
        r"trash(mail|box|)",
        r"fake(mail|inbox|box|)",
        r"disposable",
        r"discard",
        r"throw(away|mail)",
        r"dump(mail|box)",
        r"spam(box|mail|gourmet)",
        r"burn(er|able)",
        r"guer+il+a",
        r"tmpmail",
        r"yop(mail|box)",
        r"10minute",
        r"^(tmp|temp)[.-]",
        r"^mail[0-9]+\.",
    )
]

REASON_MISSING = "Email is required"
REASON_INVALID_FORMAT = "Invalid email address format"
REASON_DISPOSABLE = "Temporary or disposable email addresses are not allowed"
REASON_CONSUMER = "Please use your corporate email address"


@dataclass
class EmailPolicyDecision:
    allowed: bool
    reason: str | None = None
    code: str | None = None  # missing | invalid_format | disposable | consumer
    normalized: str | None = None


def email_domain(email: str) -> str:
    value = str(email or "").strip().lower()
    if "@" not in value:
        return ""
    return value.rsplit("@", 1)[1].strip(".")


def is_disposable_email(email: str) -> bool:
    domain = email_domain(email)
    if not domain:
        return False
    if domain in DISPOSABLE_EMAIL_DOMAINS:
        return True
    return any(pattern.search(domain) for pattern in DISPOSABLE_DOMAIN_PATTERNS)


def is_consumer_email(email: str) -> bool:
    domain = email_domain(email)
    return bool(domain) and domain in CONSUMER_EMAIL_DOMAINS


def evaluate_corporate_email(email: object, *, require_corporate: bool = True) -> EmailPolicyDecision:
    """Check syntax with email-validator, then the disposable and consumer lists.

    ``normalized`` is set on an allowed decision and is the address to store.
    """
    if email is None:
        return EmailPolicyDecision(allowed=False, reason=REASON_MISSING, code="missing")
    if not isinstance(email, str):
        return EmailPolicyDecision(allowed=False, reason=REASON_INVALID_FORMAT, code="invalid_format")
    value = email.strip()
    if not value:
        return EmailPolicyDecision(allowed=False, reason=REASON_MISSING, code="missing")
    try:
        validated = validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return EmailPolicyDecision(allowed=False, reason=REASON_INVALID_FORMAT, code="invalid_format")

    normalized = validated.normalized
    if is_disposable_email(normalized):
        return EmailPolicyDecision(allowed=False, reason=REASON_DISPOSABLE, code="disposable")
    if require_corporate and is_consumer_email(normalized):
        return EmailPolicyDecision(allowed=False, reason=REASON_CONSUMER, code="consumer")
    return EmailPolicyDecision(allowed=True, normalized=normalized)
