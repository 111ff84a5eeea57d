"""Specialization presentation: icon types, fallback copy and the default catalogue."""

# Keyword groups checked in order; the first group with a hit decides the icon.
_ICON_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("puppy", ("puppy", "young")),
    ("breed", ("breed", "specific", "poodle", "terrier")),
    ("medical", ("medic", "health", "skin", "allerg", "condition")),
    ("mobile", ("mobile", "home")),
    ("styling", ("style", "cut", "fashion", "show")),
    ("sensitive", ("sensitive", "nervous", "anxious", "gentle")),
    ("spa", ("spa", "massage", "relax", "luxury")),
    ("grooming", ("groom", "basic", "standard")),
)

ICON_TYPES = tuple(icon for icon, _ in _ICON_KEYWORDS) + ("default",)

_FALLBACK_DESCRIPTIONS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("puppy", "young"),
     "Gentle grooming services specially designed for puppies and young dogs. Our groomers "
     "are trained to make their first grooming experiences positive and stress-free."),
    (("breed",),
     "Specialized grooming techniques tailored to the specific needs of different dog breeds. "
     "Our groomers understand the unique requirements for each breed's coat type and style."),
    (("medic", "health", "skin"),
     "Special care for dogs with medical conditions, skin problems, or allergies. Our groomers "
     "work with gentle products and techniques suited for sensitive skin."),
    (("mobile", "home"),
     "Convenient grooming services brought directly to your doorstep. Ideal for busy owners "
     "or dogs that get stressed during travel."),
    (("style", "cut"),
     "Creative styling and custom cuts to make your dog stand out. From show cuts to "
     "fashion-forward styles, our groomers can create the perfect look."),
    (("sensitive", "nervous"),
     "Specialized handling for anxious, nervous, or sensitive dogs. Our patient groomers create "
     "a calm environment and use gentle techniques for a stress-free experience."),
    (("spa",),
     "Pamper your pet with our luxurious spa treatments. Including massages, aromatic baths, "
     "and conditioning treatments for a truly relaxing experience."),
)

DEFAULT_SPECIALIZATIONS: tuple[dict[str, str], ...] = (
    {"name": "Basic Grooming",
     "description": "Full grooming service including bath, brush, trim, and nail clipping."},
    {"name": "Puppy Grooming",
     "description": _FALLBACK_DESCRIPTIONS[0][1]},
    {"name": "Breed-Specific Styling",
     "description": _FALLBACK_DESCRIPTIONS[1][1]},
    {"name": "Medical Grooming",
     "description": _FALLBACK_DESCRIPTIONS[2][1]},
    {"name": "Mobile Grooming",
     "description": _FALLBACK_DESCRIPTIONS[3][1]},
    {"name": "Show Dog Styling",
     "description": "Professional grooming for show dogs following breed-specific standards "
                    "to ensure they look their best in competition."},
    {"name": "Sensitive Dog Handling",
     "description": _FALLBACK_DESCRIPTIONS[5][1]},
    {"name": "Spa Treatments",
     "description": _FALLBACK_DESCRIPTIONS[6][1]},
    {"name": "Full Grooming Service",
     "description": "Complete grooming package including bath, haircut, nail trimming, ear "
                    "cleaning, and more for a comprehensive care experience."},
)


def icon_type_for(name: str) -> str:
    """Icon tag for a specialization, derived from keywords in its name."""
    lowered = name.lower()
    for icon, keywords in _ICON_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return icon
    return "default"


def fallback_description(name: str) -> str:
    """Marketing copy for a specialization stored without a description."""
    lowered = name.lower()
    for keywords, text in _FALLBACK_DESCRIPTIONS:
        if any(keyword in lowered for keyword in keywords):
            return text
    return (
        f"Professional {lowered} services for dogs of all breeds and sizes. "
        "Our expert groomers ensure your pet looks and feels their best."
    )
