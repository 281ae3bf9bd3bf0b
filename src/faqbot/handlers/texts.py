"""User-facing texts: button labels, bot messages and commands.

Messages are sent with HTML parse mode; anything interpolated from the
catalog must be escaped with html.escape before it lands here.
"""

# Commands
CMD_START = "/start"
CMD_SEARCH = "/search"

# Button labels
BROWSE_FAQ_BUTTON = "\U0001f4da Browse FAQ"
MAIN_MENU_BUTTON = "\U0001f3e0 Main Menu"
BACK_BUTTON = "⬅️ Back"
SEARCH_BUTTON = "\U0001f50d Search"
MORE_BUTTON = "More"
HELPFUL_BUTTON = "\U0001f44d Helpful"
NOT_HELPFUL_BUTTON = "\U0001f44e Not helpful"
FEEDBACK_ACCEPTED_BUTTON = "✅ Feedback received"

# Messages
WELCOME = f"Welcome! Tap <b>{BROWSE_FAQ_BUTTON}</b> to browse the FAQ."
OPENING_MAIN_MENU = "Opening main menu..."
MAIN_MENU_HEADER = "<b>FAQ Categories</b>\n\nChoose a category:"
SUBCATEGORIES_HEADER = "<b>Subcategories</b>\n\nChoose a subcategory:"
ARTICLES_HEADER = "<b>Articles</b>\n\nChoose an article:"
SEARCH_PROMPT = "Please enter your search query in the search field."
SEARCH_RESULTS_HEADER = (
    "<b>Search Results</b>\n\nI found these articles for your query:"
)
SEARCH_NOT_FOUND = "Sorry, nothing was found for your query."
NO_SEARCH_STATE = "No search state."
CATEGORY_NOT_FOUND = "Category not found."
SUBCATEGORY_NOT_FOUND = "Subcategory not found."

# Callback toasts
ARTICLE_NOT_FOUND = "Article not found"
FEEDBACK_THANKS = "Thanks for your feedback!"
INVALID_DATA = "Invalid data"

READ_MORE_SUFFIX = "... (read more on website)"

# Bot menu (name, description)
BOT_COMMANDS: list[tuple[str, str]] = [
    ("start", "Browse the FAQ"),
    ("search", "Search the FAQ"),
]
