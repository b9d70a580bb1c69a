"""
The application's back ends: configuration, launching ModOrganizer,
exporting game data and suggesting potions. The CLI is a thin layer
over these.
"""
