"""Built-in emoji, symbol and kaomoji tables.

Each table maps a category name to (text, label, keywords) rows. Category
order is display order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from clipdeck.config.schema import CustomKaomoji
from clipdeck.pickers.items import PickerItem

Row = tuple[str, str, str]

EMOJI_TABLE: dict[str, list[Row]] = {
    "Smileys": [
        ("😀", "grinning face", "happy smile"),
        ("😂", "face with tears of joy", "laugh lol"),
        ("🙂", "slightly smiling face", "smile"),
        ("😉", "winking face", "wink"),
        ("😍", "smiling face with heart-eyes", "love crush"),
        ("🤔", "thinking face", "hmm think"),
        ("😅", "grinning face with sweat", "relief nervous"),
        ("😭", "loudly crying face", "sad cry"),
        ("😡", "pouting face", "angry mad"),
        ("😴", "sleeping face", "tired zzz"),
        ("🙃", "upside-down face", "silly sarcasm"),
        ("😎", "smiling face with sunglasses", "cool"),
    ],
    "Gestures": [
        ("👍", "thumbs up", "yes ok approve"),
        ("👎", "thumbs down", "no disapprove"),
        ("👏", "clapping hands", "applause bravo"),
        ("🙏", "folded hands", "please thanks pray"),
        ("👋", "waving hand", "hello bye"),
        ("🤝", "handshake", "deal agreement"),
        ("✌️", "victory hand", "peace"),
        ("💪", "flexed biceps", "strong"),
    ],
    "Hearts": [
        ("❤️", "red heart", "love"),
        ("🧡", "orange heart", "love"),
        ("💛", "yellow heart", "love"),
        ("💚", "green heart", "love"),
        ("💙", "blue heart", "love"),
        ("💜", "purple heart", "love"),
        ("💔", "broken heart", "sad breakup"),
    ],
    "Animals": [
        ("🐶", "dog face", "puppy pet"),
        ("🐱", "cat face", "kitten pet"),
        ("🦊", "fox", "animal"),
        ("🐼", "panda", "animal"),
        ("🐧", "penguin", "bird"),
        ("🦄", "unicorn", "magic"),
        ("🐢", "turtle", "slow"),
    ],
    "Food": [
        ("🍕", "pizza", "food"),
        ("🍔", "hamburger", "burger food"),
        ("🍣", "sushi", "food"),
        ("☕", "hot beverage", "coffee tea"),
        ("🍺", "beer mug", "drink"),
        ("🍰", "shortcake", "cake dessert"),
    ],
    "Objects": [
        ("🎉", "party popper", "celebrate tada"),
        ("🔥", "fire", "hot lit"),
        ("✨", "sparkles", "shiny new"),
        ("💡", "light bulb", "idea"),
        ("📌", "pushpin", "pin"),
        ("✅", "check mark button", "done yes"),
        ("❌", "cross mark", "no wrong"),
        ("🚀", "rocket", "launch ship"),
    ],
}

SYMBOL_TABLE: dict[str, list[Row]] = {
    "Arrows": [
        ("←", "leftwards arrow", "left"),
        ("→", "rightwards arrow", "right"),
        ("↑", "upwards arrow", "up"),
        ("↓", "downwards arrow", "down"),
        ("↔", "left right arrow", ""),
        ("⇒", "rightwards double arrow", "implies"),
        ("⇔", "left right double arrow", "iff"),
        ("↩", "leftwards arrow with hook", "return"),
    ],
    "Math": [
        ("±", "plus-minus sign", ""),
        ("×", "multiplication sign", "times"),
        ("÷", "division sign", "divide"),
        ("≠", "not equal to", ""),
        ("≈", "almost equal to", "approx"),
        ("≤", "less-than or equal to", ""),
        ("≥", "greater-than or equal to", ""),
        ("∞", "infinity", ""),
        ("√", "square root", ""),
        ("∑", "n-ary summation", "sum sigma"),
        ("π", "greek small letter pi", "pi"),
        ("°", "degree sign", "degrees"),
    ],
    "Currency": [
        ("€", "euro sign", "money"),
        ("£", "pound sign", "money"),
        ("¥", "yen sign", "money"),
        ("₹", "indian rupee sign", "money"),
        ("₿", "bitcoin sign", "crypto"),
        ("¢", "cent sign", "money"),
    ],
    "Punctuation": [
        ("…", "horizontal ellipsis", "dots"),
        ("—", "em dash", "dash"),
        ("–", "en dash", "dash"),
        ("«", "left-pointing double angle quotation mark", "quote"),
        ("»", "right-pointing double angle quotation mark", "quote"),
        ("•", "bullet", "dot"),
        ("§", "section sign", ""),
        ("¶", "pilcrow sign", "paragraph"),
    ],
    "Legal": [
        ("©", "copyright sign", ""),
        ("®", "registered sign", ""),
        ("™", "trade mark sign", "trademark"),
    ],
}

KAOMOJI_TABLE: dict[str, list[Row]] = {
    "Joy": [
        ("(＾▽＾)", "", "happy smile"),
        ("(≧▽≦)", "", "happy excited"),
        ("ヽ(・∀・)ﾉ", "", "happy cheer"),
        ("(*^‿^*)", "", "smile"),
        ("٩(◕‿◕｡)۶", "", "happy yay"),
    ],
    "Love": [
        ("(♡μ_μ)", "", "love shy"),
        ("(´｡• ᵕ •｡`) ♡", "", "love"),
        ("(づ￣ ³￣)づ", "", "kiss hug"),
        ("♡(˘▽˘>ԅ( ˘⌣˘)", "", "love couple"),
    ],
    "Sadness": [
        ("(╥﹏╥)", "", "cry sad"),
        ("(ಥ﹏ಥ)", "", "cry sad"),
        ("(｡•́︿•̀｡)", "", "sad pout"),
        ("(っ˘̩╭╮˘̩)っ", "", "sad"),
    ],
    "Anger": [
        ("(╬ Ò﹏Ó)", "", "angry mad"),
        ("(ノಠ益ಠ)ノ彡┻━┻", "", "table flip rage"),
        ("(＃`Д´)", "", "angry"),
    ],
    "Surprise": [
        ("(⊙_⊙)", "", "shock stare"),
        ("(°ロ°) !", "", "surprise"),
        ("Σ(O_O)", "", "shock"),
    ],
    "Shrug": [
        ("¯\\_(ツ)_/¯", "", "shrug whatever"),
        ("┐(￣ヘ￣)┌", "", "shrug"),
        ("╮(︶▽︶)╭", "", "shrug"),
    ],
    "Animals": [
        ("(=^･ω･^=)", "", "cat"),
        ("ʕ•ᴥ•ʔ", "", "bear"),
        ("U・ᴥ・U", "", "dog"),
        ("(・⊝・)", "", "bird penguin"),
    ],
}


def items_from_table(prefix: str, table: Mapping[str, Sequence[Row]]) -> tuple[PickerItem, ...]:
    """Flatten a category table into picker items with stable ids."""
    items: list[PickerItem] = []
    for category, rows in table.items():
        for position, (text, label, keywords) in enumerate(rows):
            items.append(
                PickerItem(
                    id=f"{prefix}-{category.lower()}-{position}",
                    display=text,
                    label=label,
                    category=category,
                    keywords=tuple(keywords.split()),
                )
            )
    return tuple(items)


def custom_kaomoji_items(custom: Iterable[CustomKaomoji]) -> tuple[PickerItem, ...]:
    """Turn configured custom kaomojis into picker items."""
    return tuple(
        PickerItem(
            id=f"custom-{position}",
            display=kaomoji.text,
            category=kaomoji.category,
            keywords=tuple(kaomoji.keywords),
            is_custom=True,
        )
        for position, kaomoji in enumerate(custom)
    )


def emoji_items() -> tuple[PickerItem, ...]:
    return items_from_table("emoji", EMOJI_TABLE)


def symbol_items() -> tuple[PickerItem, ...]:
    return items_from_table("symbol", SYMBOL_TABLE)


def kaomoji_items(custom: Iterable[CustomKaomoji] = ()) -> tuple[PickerItem, ...]:
    """Custom kaomojis first, then the built-in table."""
    return custom_kaomoji_items(custom) + items_from_table("kaomoji", KAOMOJI_TABLE)
