"""Program analyses over the typed program model."""
