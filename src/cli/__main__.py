"""``python -m src.cli alice ID1 ID2`` runs the recommend command."""

from src.cli.recommend import main

main()
