"""WhatsApp Web page automation: session, locating, chat opening and extraction."""
