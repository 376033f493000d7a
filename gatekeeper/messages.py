"""User-facing strings. The bot speaks Arabic only."""

from typing import Final

VERIFICATION_QUESTION: Final[str] = "ما هو الهدف من التوثيق؟"

PROMPT_TEXT: Final[str] = (
    "📢 هل ترغب في التقدم للتحقق؟ اضغط على الزر أدناه لبدء العملية."
)
PROMPT_BUTTON_LABEL: Final[str] = "📝 التقدم للتحقق"
APPROVE_BUTTON_LABEL: Final[str] = "✅ قبول"
REJECT_BUTTON_LABEL: Final[str] = "❌ رفض"

ADMIN_ONLY: Final[str] = "❌ هذا الأمر مخصص فقط للمسؤول."
ALREADY_VERIFIED: Final[str] = "✅ أنت بالفعل مستخدم موثق."
ALREADY_PENDING: Final[str] = "⏳ طلبك قيد المراجعة بالفعل. انتظر قرار المسؤول."
ANSWER_FORWARDED: Final[str] = "⏳ تم إرسال إجابتك إلى المسؤول. انتظر الموافقة..."
VERIFIED_SUCCESS: Final[str] = "🎉 تهانينا! تم توثيق حسابك بنجاح."
VERIFICATION_REJECTED: Final[str] = "❌ تم رفض طلب التوثيق الخاص بك."

PROMPT_UPDATED: Final[str] = "✅ تم تحديث رسالة التحقق بنجاح!"
PROMPT_SENT: Final[str] = "✅ تم إرسال رسالة التحقق بنجاح!"
PROMPT_FAILED: Final[str] = "⚠️ تعذر إرسال رسالة التحقق. تحقق من صلاحيات البوت."

THINKING: Final[str] = "🤖 Thinking..."
EMPTY_COMPLETION: Final[str] = "❌ لم أتمكن من توليد استجابة."
INFERENCE_UNAVAILABLE: Final[str] = "⚠️ الخدمة غير متاحة حاليًا، حاول لاحقًا."
CHAT_USAGE: Final[str] = "✍️ اكتب سؤالك بعد الأمر: /chat <السؤال>"

RESULT_APPROVED: Final[str] = "✅ تم القبول"
RESULT_REJECTED: Final[str] = "❌ تم الرفض"


def question_message(question: str) -> str:
    return f"📝 **سؤال التحقق:**\n{question}\n\n💡 **أرسل إجابتك الآن.**"


def approval_request(display_name: str, question: str, answer: str) -> str:
    return (
        "🔔 **طلب تحقق جديد!**\n"
        f"👤 المستخدم: {display_name}\n\n"
        f"📝 **سؤال التحقق:**\n{question}\n\n"
        f"✍️ **إجابة المستخدم:**\n{answer}"
    )
