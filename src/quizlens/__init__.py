"""quizlens -- screenshot-to-answer helper for multiple-choice questions.

One capture cycle takes a screenshot, asks a vision-capable language model
to find the first multiple-choice question on it, parses the chosen option
out of the reply and shows it in a small overlay that dismisses itself.
"""

__version__ = "0.1.0"
