from textual.widgets import Label


class InstructionText(Label):
    """A label that displays instructions for the user."""

    def __init__(self, text: str):
        super().__init__(text, markup=False)
        self.classes = "instruction_text"
