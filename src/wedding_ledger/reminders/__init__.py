"""Reminders Module - Built-in reminder and invitation templates"""
