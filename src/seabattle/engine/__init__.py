"""Board model, players and the turn controller."""
