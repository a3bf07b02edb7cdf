"""Language support: the program model and source locations."""
