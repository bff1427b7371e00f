import re

from schemas import MAX_FLASHCARDS, QUIZ_SIZE, Flashcard, Level, QuizQuestion

STOP_WORDS = frozenset("""
    the and or but in on at to for of with by is are was were be been have has had
    about above after again against because before being below between both
    could doing during further having other ought their theirs there these they
    those through under until which while would where whose should itself
    themselves yourself yours ourselves among within without also very
""".split())

SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")
WORD_RE = re.compile(r"^[a-z]+$")
LEADING_NON_LETTERS_RE = re.compile(r"^[^A-Za-z]*")

CARD_TEXT_LIMIT = 150
WORDS_PER_MINUTE = 200

GENERIC_CARD = (
    "What type of information does this text provide?",
    "Educational content that explains important concepts and provides "
    "detailed information about the topic.",
)


def _clip(text: str, limit: int = CARD_TEXT_LIMIT) -> str:
    return text[:limit] + "..." if len(text) > limit else text


def _join(words) -> str:
    return ", ".join(words)


class LocalStub:
    """Provider-free generator built on sentence and keyword statistics.

    Output depends only on the input text (and level for summaries), so the
    same input always yields the same summary, quiz and flashcards.
    """

    def _sentences(self, text):
        return [s.strip() for s in SENTENCE_RE.findall(text or "") if s.strip()]

    def _keywords(self, text, limit):
        out = []
        for word in (text or "").lower().split():
            if len(word) > 4 and WORD_RE.match(word) and word not in STOP_WORDS and word not in out:
                out.append(word)
        return out[:limit]

    def _sentence_with(self, sents, term):
        return next((s for s in sents if term in s.lower()), None)

    def summarize(self, text: str, level=Level.HIGH_SCHOOL) -> str:
        level = Level(level)
        sents = self._sentences(text)
        terms = self._keywords(text, 6)

        if terms:
            intro = (f"This {level.label} level content covers important concepts "
                     f"about {_join(terms[:3])}.")
        else:
            intro = f"This {level.label} level content covers the material provided below."

        picked = []
        if sents:
            picked.append(sents[0])
        if len(sents) > 2:
            picked.append(sents[len(sents) // 2])
        if len(sents) > 1:
            picked.append(sents[-1])

        word_count = len((text or "").split())
        minutes = max(1, round(word_count / WORDS_PER_MINUTE))
        closing = (f"At about {word_count} words, the material takes roughly {minutes} "
                   f"minute{'s' if minutes != 1 else ''} to read. Understanding these "
                   "concepts helps build a solid foundation for further learning in "
                   "this subject area.")

        parts = [intro]
        if picked:
            parts.append(" ".join(picked))
        if terms:
            parts.append(f"The material explains these key topics in detail: {_join(terms[:5])}.")
        parts.append(closing)
        return "\n\n".join(parts)

    def generate_quiz(self, text: str) -> list:
        sents = self._sentences(text)
        terms = self._keywords(text, 6)

        topic = f"Concepts related to {_join(terms[:2])}" if terms else "The subject matter presented in the text"
        statement = _clip(LEADING_NON_LETTERS_RE.sub("", sents[0])) if sents else ""
        if not statement:
            statement = "It explains key concepts about its subject."

        quiz = [
            QuizQuestion(
                question="What is the main topic of this text?",
                options=[topic, "Unrelated historical events", "A fictional story",
                         "Personal opinions without facts"],
                correct_index=0,
                explanation="The text focuses on its central subject and the ideas connected to it.",
            ),
            QuizQuestion(
                question="How is the information in this text organized?",
                options=["As an explanation of connected ideas", "As a list of random facts",
                         "As a fictional narrative", "As a series of unrelated quotes"],
                correct_index=0,
                explanation="The text presents ideas that build on each other to explain the topic.",
            ),
            QuizQuestion(
                question="Which statement best reflects the content of the text?",
                options=[statement, "The text avoids stating any facts.",
                         "The text argues against its own topic.",
                         "The text only lists references."],
                correct_index=0,
                explanation="This statement is taken directly from the text.",
            ),
        ]

        if terms:
            term = terms[0]
            found = self._sentence_with(sents, term)
            answer = _clip(found) if found else f'"{term}" is a key term discussed in the text.'
            quiz.append(QuizQuestion(
                question=f'What does the text say about "{term}"?',
                options=[answer, f'"{term}" is never mentioned in the text.',
                         f'"{term}" is only used as a chapter title.',
                         f'"{term}" is described as unrelated to the topic.'],
                correct_index=0,
                explanation=f'The text discusses "{term}" directly.',
            ))
        else:
            quiz.append(QuizQuestion(
                question="What is the best way to study this text?",
                options=["Review its key ideas and how they connect", "Memorize its word count",
                         "Skip the first and last sentences", "Read only the title"],
                correct_index=0,
                explanation="Understanding how the key ideas connect makes the material easier to recall.",
            ))
        return quiz[:QUIZ_SIZE]

    def make_flashcards(self, text: str) -> list:
        sents = self._sentences(text)
        cards = []

        if sents:
            first = LEADING_NON_LETTERS_RE.sub("", sents[0])
            if first:
                cards.append(Flashcard(front="What is the main concept explained in this text?",
                                       back=_clip(first)))

        for term in self._keywords(text, MAX_FLASHCARDS):
            found = self._sentence_with(sents, term)
            if found:
                cards.append(Flashcard(front=f'What does "{term}" refer to in this context?',
                                       back=_clip(found)))
            else:
                cards.append(Flashcard(
                    front=f"What is {term}?",
                    back="A key concept discussed in the text that is important for "
                         "understanding the subject matter.",
                ))

        while len(cards) < 3:
            cards.append(Flashcard(front=GENERIC_CARD[0], back=GENERIC_CARD[1]))

        return cards[:MAX_FLASHCARDS]
