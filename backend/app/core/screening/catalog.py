"""
Screening test catalog.

Static definitions of every screening test: the questions, the family and
age band they belong to, and the scoring profile they are scored with.

Each family starts from the caller's baseline profile and overrides only
what differs:

    Family        Time thresholds (easy/medium/hard)   Extra rules
    ------------  -----------------------------------  ---------------------------------
    reading       15 / 25 / 40                         average time > 30s
    phonological  12 / 20 / 30                         -
    spelling      15 / 25 / 35                         -
    memory        20 / 35 / 50                         free-recall accuracy < 50%
    sequencing    25 / 40 / 60                         ordered accuracy < 50%,
                                                       medium+hard accuracy < 40%

Tests written for the 6-9 and 9-12 age bands use 25 / 40 / 60 thresholds
regardless of family.
"""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Tuple

from libs.domain_types import AgeBand, DifficultyLevel, QuestionKind, TestFamily

from app.core.screening._types import Question
from app.core.screening.errors import TestNotFoundError
from app.core.screening.profile import ScoringProfile
from app.core.screening.rules import (
    average_time_above,
    difficulty_accuracy_below,
    kind_accuracy_below,
    sequence_order_rule,
)

EASY = DifficultyLevel.EASY
MEDIUM = DifficultyLevel.MEDIUM
HARD = DifficultyLevel.HARD

SINGLE_CHOICE = QuestionKind.SINGLE_CHOICE
ORDERED_SEQUENCE = QuestionKind.ORDERED_SEQUENCE
FREE_RECALL = QuestionKind.FREE_RECALL
SPELLING_BLANK = QuestionKind.SPELLING_BLANK


@dataclass(frozen=True)
class TestDefinition:
    """A complete screening test: questions plus how they are scored."""

    __test__ = False

    test_id: str
    title: str
    family: TestFamily
    age_band: AgeBand
    description: str
    questions: Tuple[Question, ...]
    profile: ScoringProfile

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def is_timed(self) -> bool:
        """Whether any question uses a timed presentation phase."""
        return any(q.is_timed for q in self.questions)


# =============================================================================
# QUESTION BANKS
# =============================================================================

READING_QUESTIONS = (
    Question(
        SINGLE_CHOICE,
        "The cat sat on the mat. The dog barked at the cat. The cat jumped off "
        "the mat and ran away. Where did the cat sit?",
        1,
        EASY,
        options=("On the chair", "On the mat", "On the floor", "On the table"),
    ),
    Question(
        SINGLE_CHOICE,
        "Sarah went to the grocery store to buy ingredients for dinner. She needed "
        "tomatoes, onions, cheese, and bread. At the store, she remembered "
        "everything except one item. She forgot to buy cheese. What did Sarah forget?",
        2,
        MEDIUM,
        options=("Tomatoes", "Onions", "Cheese", "Bread"),
    ),
    Question(
        SINGLE_CHOICE,
        "The research conducted by Dr. Martinez demonstrated that cognitive "
        "flexibility significantly improves when individuals engage in "
        "multidisciplinary learning approaches. The study examined participants "
        "over a six-month period, analyzing their problem-solving capabilities. "
        "What was the main finding of Dr. Martinez's research?",
        1,
        HARD,
        options=(
            "Learning approaches don't affect cognitive flexibility",
            "Cognitive flexibility improves with multidisciplinary learning",
            "Problem-solving capabilities decrease over time",
            "Six-month studies are ineffective",
        ),
    ),
    Question(
        SINGLE_CHOICE,
        "Tom likes to play soccer every Saturday with his friends at the local "
        "park. They usually meet at 2:00 PM and play until 4:00 PM. What sport "
        "does Tom play?",
        2,
        EASY,
        options=("Basketball", "Tennis", "Soccer", "Baseball"),
    ),
    Question(
        SINGLE_CHOICE,
        "The environmental impact assessment revealed that the proposed "
        "construction project would affect three major ecosystems: wetlands, "
        "grasslands, and forest areas. The wetlands showed the highest "
        "vulnerability to disruption, while the grasslands demonstrated moderate "
        "resilience. Which ecosystem was most vulnerable?",
        1,
        HARD,
        options=("Forest areas", "Wetlands", "Grasslands", "All equally vulnerable"),
    ),
    Question(
        SINGLE_CHOICE,
        "During the school festival, Maria's class organized a bake sale. They "
        "sold cookies, cupcakes, and brownies. The cookies were $2 each, cupcakes "
        "were $3 each, and brownies were $4 each. If they sold 10 cookies, 8 "
        "cupcakes, and 5 brownies, how much money did they make from cookies?",
        1,
        MEDIUM,
        options=("$15", "$20", "$24", "$44"),
    ),
)

READING_6_9_QUESTIONS = (
    Question(SINGLE_CHOICE, "What animal is this? 🐱", 1, EASY,
             options=("Dog", "Cat", "Bird", "Fish")),
    Question(SINGLE_CHOICE, "What fruit is this? 🍎", 2, EASY,
             options=("Orange", "Banana", "Apple", "Grape")),
    Question(SINGLE_CHOICE, "What is this? 🚗", 2, EASY,
             options=("Bike", "Plane", "Car", "Train")),
    Question(SINGLE_CHOICE, "What building is this? 🏠", 2, MEDIUM,
             options=("School", "Store", "House", "Hospital")),
    Question(SINGLE_CHOICE, "What do you see in the sky during the day? ☀️", 2, MEDIUM,
             options=("Moon", "Stars", "Sun", "Clouds")),
)

READING_9_12_QUESTIONS = (
    Question(
        SINGLE_CHOICE,
        "The brave little mouse lived in a big library. Every night, he would "
        "read books to learn new things. His favorite books were about "
        "adventures in faraway places. Where did the mouse live?",
        1,
        EASY,
        options=("In a house", "In a library", "In a forest", "In a school"),
    ),
    Question(
        SINGLE_CHOICE,
        "Sarah planted seeds in her garden. She watered them every day and made "
        "sure they got plenty of sunlight. After two weeks, small green plants "
        "began to grow. How long did it take for the plants to start growing?",
        1,
        MEDIUM,
        options=("One week", "Two weeks", "One month", "Three weeks"),
    ),
    Question(
        SINGLE_CHOICE,
        "The soccer team practiced every Tuesday and Thursday. They worked hard "
        "on passing, shooting, and teamwork. Their coach was very proud of their "
        "improvement. How many days per week did the team practice?",
        1,
        MEDIUM,
        options=("One day", "Two days", "Three days", "Every day"),
    ),
)

PHONOLOGICAL_QUESTIONS = (
    Question(SINGLE_CHOICE, "Which word begins with a different sound than the others?",
             2, EASY, options=("Cat", "Cut", "Pen", "Cake")),
    Question(SINGLE_CHOICE, "Which word rhymes with 'light'?",
             2, EASY, options=("Let", "Late", "Bright", "Look")),
    Question(SINGLE_CHOICE, "What sound do you hear at the end of the word 'dog'?",
             2, MEDIUM, options=("/d/", "/o/", "/g/", "/p/")),
    Question(SINGLE_CHOICE, "How many syllables are in the word 'butterfly'?",
             1, MEDIUM, options=("Two", "Three", "Four", "Five")),
    Question(SINGLE_CHOICE, "If you remove the first sound from 'plate', what word do you get?",
             0, HARD, options=("Ate", "Late", "Pale", "Rate")),
    Question(SINGLE_CHOICE, "Which word has the same middle sound as 'cat'?",
             1, HARD, options=("Cup", "Hat", "Coat", "Cut")),
)

PHONOLOGICAL_6_9_QUESTIONS = (
    Question(SINGLE_CHOICE, "Listen: CAT. Which picture starts with the same sound as CAT?",
             1, EASY, options=("Dog", "Car", "Ball", "Fish")),
    Question(SINGLE_CHOICE, "Listen: SUN. Which picture starts with the same sound as SUN?",
             1, EASY, options=("Moon", "Star", "Tree", "House")),
    Question(SINGLE_CHOICE, "Listen: BALL. Which picture starts with the same sound as BALL?",
             1, MEDIUM, options=("Car", "Book", "Apple", "Dog")),
    Question(SINGLE_CHOICE, "Listen: DUCK. Which picture starts with the same sound as DUCK?",
             2, MEDIUM, options=("Cat", "Frog", "Door", "Bike")),
)

MEMORY_QUESTIONS = (
    Question(
        ORDERED_SEQUENCE,
        "Memorize these numbers, then recall them in the same order:",
        ("3", "7", "2", "9", "4"),
        EASY,
        stimulus=("3", "7", "2", "9", "4"),
        presentation_duration_seconds=5,
    ),
    Question(
        ORDERED_SEQUENCE,
        "Memorize these letters, then recall them in the same order:",
        ("K", "L", "B", "R", "F", "Z"),
        MEDIUM,
        stimulus=("K", "L", "B", "R", "F", "Z"),
        presentation_duration_seconds=6,
    ),
    Question(
        ORDERED_SEQUENCE,
        "Memorize these numbers, then recall them in reverse order:",
        ("6", "1", "3", "9", "5"),
        MEDIUM,
        stimulus=("5", "9", "3", "1", "6"),
        presentation_duration_seconds=6,
    ),
    Question(
        FREE_RECALL,
        "Memorize these words, then recall as many as you can in any order:",
        ("house", "tree", "car", "dog", "book", "chair", "pen"),
        HARD,
        stimulus=("house", "tree", "car", "dog", "book", "chair", "pen"),
        presentation_duration_seconds=8,
    ),
)

MEMORY_6_9_QUESTIONS = (
    Question(
        FREE_RECALL,
        "Which items did you see? (Pick all 3)",
        ("Apple", "Cat", "Car"),
        EASY,
        stimulus=("🍎", "🐱", "🚗"),
        options=("Apple", "Dog", "Cat", "Car", "Star", "House"),
        presentation_duration_seconds=3,
    ),
    Question(
        FREE_RECALL,
        "Which items did you see? (Pick all 3)",
        ("Star", "Moon", "Tree"),
        EASY,
        stimulus=("⭐", "🌙", "🌳"),
        options=("Star", "Sun", "Moon", "Tree", "Flower", "Butterfly"),
        presentation_duration_seconds=3,
    ),
    Question(
        FREE_RECALL,
        "Which items did you see? (Pick all 3)",
        ("Book", "Pencil", "Backpack"),
        MEDIUM,
        stimulus=("📚", "✏️", "🎒"),
        options=("Book", "Pencil", "Computer", "Backpack", "Paper", "Pen"),
        presentation_duration_seconds=3,
    ),
)

SEQUENCING_QUESTIONS = (
    Question(
        ORDERED_SEQUENCE,
        "Arrange these numbers in ascending order (smallest to largest):",
        ("1", "2", "4", "7", "9"),
        EASY,
        options=("7", "2", "9", "4", "1"),
    ),
    Question(
        ORDERED_SEQUENCE,
        "Arrange these months in calendar order:",
        ("January", "March", "June", "August", "October"),
        MEDIUM,
        options=("June", "January", "October", "March", "August"),
    ),
    Question(
        ORDERED_SEQUENCE,
        "Arrange these events in historical order (earliest to latest):",
        (
            "Declaration of Independence",
            "Industrial Revolution",
            "World War II",
            "First Moon Landing",
            "Fall of the Berlin Wall",
        ),
        HARD,
        options=(
            "World War II",
            "First Moon Landing",
            "Declaration of Independence",
            "Fall of the Berlin Wall",
            "Industrial Revolution",
        ),
    ),
    Question(
        ORDERED_SEQUENCE,
        "Arrange these steps for making a sandwich in the correct order:",
        (
            "Take out bread",
            "Spread butter or sauce",
            "Add toppings",
            "Place the second slice on top",
            "Cut the sandwich",
        ),
        MEDIUM,
        options=(
            "Add toppings",
            "Cut the sandwich",
            "Take out bread",
            "Spread butter or sauce",
            "Place the second slice on top",
        ),
    ),
)

SPELLING_QUESTIONS = (
    Question(SPELLING_BLANK, "I'm wearing a jacket _____ it's cold outside.",
             "because", EASY, hint="for the reason that"),
    Question(SPELLING_BLANK, "The sunset was _____ this evening.",
             "beautiful", EASY, hint="pleasing to the senses or mind"),
    Question(SPELLING_BLANK, "I'm _____ going to the concert tonight.",
             "definitely", MEDIUM, hint="without doubt"),
    Question(SPELLING_BLANK, "It is _____ to complete all the forms.",
             "necessary", MEDIUM, hint="required to be done"),
    Question(SPELLING_BLANK, "The drummer kept a steady _____ throughout the song.",
             "rhythm", HARD, hint="a strong, regular pattern of movement or sound"),
    Question(SPELLING_BLANK, "She wanted to become a _____ to help people with anxiety.",
             "psychologist", HARD,
             hint="a professional who studies mental processes and behavior"),
)


# =============================================================================
# FAMILY PROFILES
# =============================================================================

CHILD_BAND_THRESHOLDS = {"easy": 25, "medium": 40, "hard": 60}

# Only thresholds that differ from the baseline; the rest are inherited
FAMILY_THRESHOLDS: Dict[TestFamily, Dict[str, float]] = {
    TestFamily.READING: {},
    TestFamily.PHONOLOGICAL: {"easy": 12, "medium": 20, "hard": 30},
    TestFamily.SPELLING: {"hard": 35},
    TestFamily.MEMORY: {"easy": 20, "medium": 35, "hard": 50},
    TestFamily.SEQUENCING: {"easy": 25, "medium": 40, "hard": 60},
}

FAMILY_RULES = {
    TestFamily.READING: (
        average_time_above(30, "extended processing time per question"),
    ),
    TestFamily.MEMORY: (
        kind_accuracy_below(FREE_RECALL, 50, "difficulty with free recall"),
    ),
    TestFamily.SEQUENCING: (
        sequence_order_rule(),
        difficulty_accuracy_below(
            (MEDIUM, HARD), 40, "significant difficulty with complex sequencing"
        ),
    ),
}


def family_profile(
    family: TestFamily, age_band: AgeBand, baseline: ScoringProfile
) -> ScoringProfile:
    """Derive a family's scoring profile from the baseline profile."""
    if age_band == AgeBand.GENERAL:
        thresholds = FAMILY_THRESHOLDS[family]
    else:
        thresholds = CHILD_BAND_THRESHOLDS
    profile = baseline.with_thresholds(**thresholds)
    return profile.with_extra_rules(*FAMILY_RULES.get(family, ()))


# (test_id, title, family, age band, description, questions)
_DEFINITIONS: List[Tuple[str, str, TestFamily, AgeBand, str, Tuple[Question, ...]]] = [
    ("reading", "Reading Comprehension", TestFamily.READING, AgeBand.GENERAL,
     "Read short passages and answer a question about each.", READING_QUESTIONS),
    ("reading-6-9", "Picture Reading (Ages 6-9)", TestFamily.READING, AgeBand.AGES_6_9,
     "Name the pictured object.", READING_6_9_QUESTIONS),
    ("reading-9-12", "Story Reading (Ages 9-12)", TestFamily.READING, AgeBand.AGES_9_12,
     "Read a short story and answer a question about it.", READING_9_12_QUESTIONS),
    ("phonological", "Phonological Awareness", TestFamily.PHONOLOGICAL, AgeBand.GENERAL,
     "Identify sounds, rhymes and syllables in words.", PHONOLOGICAL_QUESTIONS),
    ("phonological-6-9", "Sound Match (Ages 6-9)", TestFamily.PHONOLOGICAL,
     AgeBand.AGES_6_9, "Pick the picture that starts with the same sound.",
     PHONOLOGICAL_6_9_QUESTIONS),
    ("memory", "Working Memory", TestFamily.MEMORY, AgeBand.GENERAL,
     "Memorize items shown for a few seconds, then recall them.", MEMORY_QUESTIONS),
    ("memory-6-9", "Memory Match (Ages 6-9)", TestFamily.MEMORY, AgeBand.AGES_6_9,
     "Remember the pictures, then pick the ones you saw.", MEMORY_6_9_QUESTIONS),
    ("sequencing", "Sequencing", TestFamily.SEQUENCING, AgeBand.GENERAL,
     "Arrange items in the correct order.", SEQUENCING_QUESTIONS),
    ("spelling", "Spelling", TestFamily.SPELLING, AgeBand.GENERAL,
     "Spell the missing word in each sentence.", SPELLING_QUESTIONS),
]


def build_catalog(baseline: ScoringProfile) -> Dict[str, TestDefinition]:
    """
    Build every test definition from a baseline scoring profile.

    Args:
        baseline: Profile supplying defaults each family overrides
            (pass ratios, default rules, level cutoffs).

    Returns:
        Mapping of test id to TestDefinition, in catalog order.
    """
    return {
        test_id: TestDefinition(
            test_id=test_id,
            title=title,
            family=family,
            age_band=age_band,
            description=description,
            questions=questions,
            profile=family_profile(family, age_band, baseline),
        )
        for test_id, title, family, age_band, description, questions in _DEFINITIONS
    }


def get_test_definition(
    catalog: Mapping[str, TestDefinition], test_id: str
) -> TestDefinition:
    """
    Look up a test definition.

    Raises:
        TestNotFoundError: If test_id is not in the catalog.
    """
    try:
        return catalog[test_id]
    except KeyError:
        raise TestNotFoundError(test_id) from None
