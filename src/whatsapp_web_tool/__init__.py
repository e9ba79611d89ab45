"""Automate WhatsApp Web through a controlled browser."""
