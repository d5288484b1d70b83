"""
WhatsApp Message Texts
======================
Bilingual bodies for the notifications PayDota sends.
"""

from datetime import datetime
from typing import Dict, Optional

from paydota_core.otp.models import Language

from .models import CardType, SecurityAlertType, TransactionType

OTP_TEMPLATES: Dict[Language, str] = {
    Language.AR: (
        "رمز التحقق الخاص بك في PayDota هو: {code}\n\n"
        "لا تشارك هذا الرمز مع أي شخص آخر.\n"
        "صالح لمدة 5 دقائق."
    ),
    Language.EN: (
        "Your PayDota verification code is: {code}\n\n"
        "Do not share this code with anyone.\n"
        "Valid for 5 minutes."
    ),
}

TRANSACTION_NAMES: Dict[Language, Dict[TransactionType, str]] = {
    Language.AR: {
        TransactionType.DEPOSIT: "إيداع",
        TransactionType.WITHDRAW: "سحب",
        TransactionType.TRANSFER: "تحويل",
        TransactionType.PAYMENT: "دفع",
    },
    Language.EN: {
        TransactionType.DEPOSIT: "Deposit",
        TransactionType.WITHDRAW: "Withdrawal",
        TransactionType.TRANSFER: "Transfer",
        TransactionType.PAYMENT: "Payment",
    },
}

TRANSACTION_TEMPLATES: Dict[Language, str] = {
    Language.AR: (
        "✅ تم تأكيد عملية {name} بمبلغ {amount} {currency} في حسابك PayDota.\n\n"
        "الوقت: {time}\n\n"
        "شكراً لاستخدام PayDota!"
    ),
    Language.EN: (
        "✅ Your {name} of {amount} {currency} has been confirmed in your PayDota account.\n\n"
        "Time: {time}\n\n"
        "Thank you for using PayDota!"
    ),
}

SECURITY_ALERTS: Dict[Language, Dict[SecurityAlertType, str]] = {
    Language.AR: {
        SecurityAlertType.LOGIN: (
            "🔐 تم تسجيل دخول جديد إلى حسابك PayDota.\n\n"
            "إذا لم تكن أنت، يرجى تغيير كلمة المرور فوراً."
        ),
        SecurityAlertType.PASSWORD_CHANGE: (
            "🔑 تم تغيير كلمة مرور حسابك PayDota بنجاح.\n\n"
            "إذا لم تقم بهذا التغيير، يرجى الاتصال بالدعم فوراً."
        ),
        SecurityAlertType.SUSPICIOUS_ACTIVITY: (
            "⚠️ تم اكتشاف نشاط مشبوه في حسابك PayDota.\n\n"
            "يرجى مراجعة حسابك وتغيير كلمة المرور إذا لزم الأمر."
        ),
    },
    Language.EN: {
        SecurityAlertType.LOGIN: (
            "🔐 New login detected on your PayDota account.\n\n"
            "If this wasn't you, please change your password immediately."
        ),
        SecurityAlertType.PASSWORD_CHANGE: (
            "🔑 Your PayDota account password has been successfully changed.\n\n"
            "If you didn't make this change, please contact support immediately."
        ),
        SecurityAlertType.SUSPICIOUS_ACTIVITY: (
            "⚠️ Suspicious activity detected on your PayDota account.\n\n"
            "Please review your account and change your password if necessary."
        ),
    },
}

CARD_NAMES: Dict[Language, Dict[CardType, str]] = {
    Language.AR: {CardType.VIRTUAL: "افتراضية", CardType.PHYSICAL: "فيزيائية"},
    Language.EN: {CardType.VIRTUAL: "Virtual", CardType.PHYSICAL: "Physical"},
}

CARD_TEMPLATES: Dict[Language, str] = {
    Language.AR: (
        "💳 تم إنشاء بطاقة {name} جديدة بنجاح!\n\n"
        "آخر 4 أرقام: {last4}\n\n"
        "يمكنك الآن استخدام بطاقتك للمدفوعات."
    ),
    Language.EN: (
        "💳 New {name} card created successfully!\n\n"
        "Last 4 digits: {last4}\n\n"
        "You can now use your card for payments."
    ),
}


def otp_message(code: str, language: Language) -> str:
    return OTP_TEMPLATES[Language(language)].format(code=code)


def transaction_message(
    transaction_type: TransactionType,
    amount: str,
    currency: str,
    language: Language,
    at: Optional[datetime] = None,
) -> str:
    language = Language(language)
    at = at or datetime.now()
    return TRANSACTION_TEMPLATES[language].format(
        name=TRANSACTION_NAMES[language][TransactionType(transaction_type)],
        amount=amount,
        currency=currency,
        time=at.strftime("%Y-%m-%d %H:%M:%S"),
    )


def security_alert_message(alert_type: SecurityAlertType, language: Language) -> str:
    return SECURITY_ALERTS[Language(language)][SecurityAlertType(alert_type)]


def card_message(card_type: CardType, card_last4: str, language: Language) -> str:
    language = Language(language)
    return CARD_TEMPLATES[language].format(
        name=CARD_NAMES[language][CardType(card_type)],
        last4=card_last4,
    )
