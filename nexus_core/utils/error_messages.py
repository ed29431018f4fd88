"""Standardized user-facing notices (Polish, as shown to customers)."""

from __future__ import annotations

from typing import Any


def get_error_message(error_type: str, **kwargs: Any) -> str:
    """
    Get formatted error message with variables.

    Args:
        error_type: Type of error (key from ERROR_MESSAGES)
        **kwargs: Variables to format into the message

    Returns:
        Formatted error message string
    """
    message_template = ERROR_MESSAGES.get(error_type, "❌ Wystąpił błąd. Spróbuj ponownie później.")

    try:
        return message_template.format(**kwargs)
    except KeyError:
        return f"❌ {error_type.replace('_', ' ').capitalize()}."


ERROR_MESSAGES = {
    # Permissions and channel scope
    "admin_only": "❌ Ta komenda jest zarezerwowana dla administracji!",
    "no_permission": "❌ Nie masz uprawnień!",
    "claim_admin_only": "❌ Tylko administracja może przejmować lub odrzucać zgłoszenia!",
    "ticket_channel_only": "❌ Ta komenda działa tylko na kanałach zamówień!",
    "order_ticket_only": "❌ Ta komenda działa tylko w ticketach zamówień.",
    "customer_not_found": "❌ Nie znaleziono ID klienta w temacie kanału.",

    # Redemption
    "order_code_not_found": (
        "❌ Nie znaleziono zamówienia o kodzie **{code}**. Upewnij się, że kod jest poprawny."
    ),
    "order_already_verified": "⚠️ To zamówienie (**{code}**) zostało już zweryfikowane.",
    "order_rejected": (
        "⚠️ To zamówienie (**{code}**) zostało odrzucone i nie może być ponownie zweryfikowane."
    ),
    "ticket_in_progress": "♻️ Zamówienie jest przetwarzane! Sprawdź kanał.",
    "ticket_create_failed": "🔥 Wystąpił błąd podczas tworzenia ticketa. Spróbuj ponownie później.",

    # Lifecycle
    "interaction_failed": "❌ Błąd.",
    "order_not_found": "❌ Nie znaleziono zamówienia powiązanego z tym zgłoszeniem.",
    "order_id_not_found": "❌ Nie znaleziono zamówienia o ID `{order_id}` w bazie danych.",
    "order_finalized": "⚠️ Zamówienie ma już status **{status}** i nie może zostać zmienione.",
    "order_transition_refused": (
        "⚠️ Zamówienie ma status **{status}**. Nie można go zmienić na **{target}**."
    ),
    "status_update_failed": "❌ Błąd bazy danych (czy ID zamówienia w nazwie kanału jest poprawne?).",

    # Transcripts and summons
    "backup_failed": "🔥 Błąd podczas generowania backupu.",
    "summon_failed": "🔥 Błąd podczas wysyłania wezwania.",

    # Payments
    "payment_data_missing": (
        "❌ Nie udało się odczytać danych zamówienia. Upewnij się, że wiadomość "
        "z danymi zamówienia znajduje się na tym kanale."
    ),
    "payment_not_configured": "❌ Numer BLIK nie jest skonfigurowany (BLIK_PHONE_NUMBER).",
    "payment_failed": "🔥 Błąd podczas pobierania danych płatności.",

    # Announcements
    "announcement_usage": (
        "❌ Użycie: `!ogloszenie (treść) (id)`. Przykład: `!ogloszenie Zapraszamy do zakupów! promo1`"
    ),
    "announcement_delete_usage": (
        "❌ Podaj ID ogłoszenia do usunięcia. Przykład: `!ogloszenie usun shop-info`"
    ),
    "announcement_not_found": "❌ Nie znaleziono ogłoszenia o ID `{announcement_id}`.",
    "announcement_channel_missing": "❌ Kanał ogłoszeń nie jest skonfigurowany (ANN_CHANNEL_ID).",
    "announcement_send_failed": "🔥 Błąd podczas wysyłania ogłoszenia.",
    "announcement_delete_failed": "🔥 Błąd podczas usuwania ogłoszenia.",

    # Setup
    "setup_channel_missing": "❌ {variable} not set.",
    "setup_usage": "❌ Usage: `!setup rules` or `!setup links`.",
}
