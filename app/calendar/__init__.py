"""
Calendar System

Google Calendar OAuth linking and upcoming-event reads.
"""
