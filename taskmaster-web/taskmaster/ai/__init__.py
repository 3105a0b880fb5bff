"""Text-generation assistant used by the Command Center, Missions and Team pages."""
