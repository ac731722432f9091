"""Forward links sent to a Telegram bot to a download executor."""
