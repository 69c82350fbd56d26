"""
prop.agenda - Agenda puzzle engine

A single-player board puzzle: place emoji objects on a 5x5 grid and
satisfy a sequence of agendas ("all snails must be purple").
The engine provides:
- Agenda checks that judge a board and explain what is missing
- Difficulty-weighted selection of the next agenda
- Ephemeral game sessions and a REST API for clients
"""

__version__ = "0.1.0"
