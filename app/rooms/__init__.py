"""
Rooms System

Time capsule rooms owned by users, plus each user's saved rooms.
"""
