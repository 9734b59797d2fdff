"""Builtin demo corpus used when no documents are supplied."""

from __future__ import annotations

from .models import Document

BUILTIN_DOCS: list[Document] = [
    Document(
        id="doc-1",
        title="Sourdough starter basics",
        text=(
            "A sourdough starter is a fermented mix of flour and water that "
            "carries wild yeast and lactic acid bacteria. Feed it daily and keep "
            "it at room temperature until it doubles within a few hours."
        ),
        tags=["baking", "fermentation"],
    ),
    Document(
        id="doc-2",
        title="Espresso extraction",
        text=(
            "Espresso is brewed by forcing hot water through finely ground coffee "
            "at high pressure. Grind size, dose and shot time control how sour or "
            "bitter the extraction tastes."
        ),
        tags=["coffee"],
    ),
    Document(
        id="doc-3",
        title="Training for a first marathon",
        text=(
            "Most marathon plans build weekly mileage slowly over sixteen to twenty "
            "weeks, with one long run each weekend and easy recovery days in between."
        ),
        tags=["running", "fitness"],
    ),
    Document(
        id="doc-4",
        title="Repotting houseplants",
        text=(
            "Repot a houseplant when roots circle the bottom of the pot. Choose a "
            "container one size larger and use fresh, well draining soil."
        ),
        tags=["gardening"],
    ),
    Document(
        id="doc-5",
        title="Backing up a laptop",
        text=(
            "Keep three copies of important files on two kinds of storage with one "
            "copy off site. Automated nightly backups to an external drive and a "
            "cloud service cover most failures."
        ),
        tags=["computing", "security"],
    ),
    Document(
        id="doc-6",
        title="Night sky for beginners",
        text=(
            "On a clear, moonless night you can find the Big Dipper, follow its "
            "handle to Arcturus, and spot Jupiter as a bright steady point that "
            "does not twinkle."
        ),
        tags=["astronomy"],
    ),
    Document(
        id="doc-7",
        title="Cold brew coffee at home",
        text=(
            "Cold brew steeps coarse coffee grounds in cold water for twelve to "
            "eighteen hours, giving a smooth, less acidic concentrate to dilute "
            "with milk or water."
        ),
        tags=["coffee"],
    ),
    Document(
        id="doc-8",
        title="Keeping bread fresh",
        text=(
            "Store crusty bread cut side down on a board for a day, then slice and "
            "freeze the rest. The fridge makes bread go stale faster."
        ),
        tags=["baking", "kitchen"],
    ),
]
