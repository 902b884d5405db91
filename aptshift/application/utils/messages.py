"""User-facing reply texts (Ukrainian)."""

RULE_MESSAGES = {
    "format": 'Недійсний формат часу: {value}. Використовуйте формат "ГГ:00".',
    "checkout": "Час виїзду повинен бути до 14:00",
    "checkin": "Час заїзду повинен бути пізніше 14:00",
    "cleaning": "Прибирання має починатися щонайменше через 30 хв після виїзду і завершитися до 14:00",
    "cleaning_no_checkout": "Неможливо призначити прибирання: час виїзду ще не встановлено",
}

NO_ACCESS = "Вибачте, але у вас немає доступу до цієї квартири."
BOOKING_NOT_FOUND = "Завдання з ID {booking_id} не знайдено."
TYPE_MISMATCH = "Неможливо змінити це поле для цього типу завдання."
TRANSIENT_CONFLICT = "Не вдалося зберегти зміну: завдання щойно оновив хтось інший. Спробуйте ще раз."
GENERIC_ERROR = "Сталася помилка при виконанні команди. Спробуйте пізніше."
ORACLE_REJECTED = "Зміну не можна застосувати."

NOT_TIME_CHANGE = "Я можу змінювати лише час заїзду, виїзду або прибирання. Уточніть, будь ласка, запит."
UNRESOLVED = "Не вдалося визначити, про яке завдання йдеться. Вкажіть номер квартири, дату або ім'я гостя."
SIBLING_UNRESOLVED = "Зміна №{index}: не вдалося визначити завдання."

VALIDATION_HEADER = "❌ Зміну не застосовано:"
CONFLICT_LINE = "⚠️ Конфлікт ({type}, {time}): {description}"

CHANGE_LABELS = {
    "checkin": "Час заїзду",
    "checkout": "Час виїзду",
    "cleaning": "Час прибирання",
}
BOOKING_TYPE_LABELS = {
    "checkin": "заїзд",
    "checkout": "виїзд",
}

APPLIED = "✅ {label} оновлено на {new_time}\n🏠 {address} (ID {apartment_id})\n📅 {date}"
ALREADY_SET = "ℹ️ {label} для квартири {apartment_id} на {date} вже {new_time}."

AMBIGUOUS_HEADER = "Знайдено кілька завдань. Оберіть потрібне:"
CLARIFICATION_HEADERS = {
    "date": "Уточніть дату:",
    "apartment": "Уточніть квартиру:",
    "guest": "Уточніть гостя:",
    "time": "Уточніть час:",
}

INFO_NOTHING_TO_UPDATE = "Не вказано ні суму, ні кількість ключів для оновлення."
INFO_UPDATED_SUM = "сума до оплати - {sum} грн"
INFO_UPDATED_KEYS = "кількість ключів - {keys}"
INFO_UPDATED = "Оновлено: {details}"
INFO_INVALID_SUM = "Сума до оплати не може бути відʼємною."
INFO_INVALID_KEYS = "Кількість ключів не може бути відʼємною."

ADMIN_ONLY_ASSIGNMENTS = "Тільки адміністратори можуть керувати призначеннями квартир."
USER_NOT_FOUND = "Не знайшов користувача за запитом '{user_id}'."
ASSIGNMENTS_ADDED = "Успішно додано квартири {apartment_ids} до користувача {user_id}."
ASSIGNMENTS_REMOVED = "Успішно видалено квартири {apartment_ids} у користувача {user_id}."
ASSIGNMENTS_EMPTY = "У користувача {user_id} немає призначених квартир."
ASSIGNMENTS_LIST = "У користувача {user_id} призначені квартири: {apartment_ids}"
