"""Card database and deck management"""
from .database import CardDatabase, CardData, UnknownCardError, get_card, get_database
from .parser import Deck, Decklist, DecklistEntry, DecklistError, DecklistParser
