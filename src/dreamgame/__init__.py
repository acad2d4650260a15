"""DreamGame progression and personalized content engine."""
