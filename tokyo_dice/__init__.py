"""
Tokyo Dice.

Keep/re-roll decision engine for computer-controlled monsters.
"""
