import pytest

from wallet import Choice, SecretRequest, SelectRequest, TerminalPrompter, TextRequest

STORAGE = SelectRequest("Store how?", (Choice("Encrypted", "e"), Choice("Plaintext", "p")))


def make_prompter(inputs=(), secrets=()):
    inputs, secrets, output = list(inputs), list(secrets), []
    prompter = TerminalPrompter(
        input_func=lambda prompt="": inputs.pop(0),
        getpass_func=lambda prompt="": secrets.pop(0),
        output=output.append,
    )
    return prompter, output


@pytest.mark.parametrize("answer, expected", [("1", "e"), ("2", "p"), ("p", "p")])
def test_select(answer, expected):
    prompter, output = make_prompter([answer])

    assert prompter.ask(STORAGE) == expected
    assert output[:3] == ["Store how?", "  1) Encrypted", "  2) Plaintext"]


def test_select_reasks_on_bad_answer():
    prompter, output = make_prompter(["9", "x", "2"])

    assert prompter.ask(STORAGE) == "p"
    assert output.count("Please enter a number between 1 and 2") == 2


def test_unnumbered_select_answers_by_value():
    request = SelectRequest(
        "Select the active mnemonic:",
        (Choice("0 - First (plaintext)", "0"), Choice("1 - Second (encoded) *", "1")),
        numbered=False,
    )
    prompter, output = make_prompter(["2", "1"])

    assert prompter.ask(request) == "1"
    assert output[1:3] == ["  0 - First (plaintext)", "  1 - Second (encoded) *"]
    assert output[-1] == "Please enter one of: 0, 1"


def test_select_without_choices():
    prompter, _ = make_prompter()
    with pytest.raises(ValueError):
        prompter.ask(SelectRequest("Nothing", ()))


def test_text_default():
    prompter, _ = make_prompter(["", " custom "])

    assert prompter.ask(TextRequest("Label:", default="Mnemonic 1")) == "Mnemonic 1"
    assert prompter.ask(TextRequest("Label:", default="Mnemonic 1")) == "custom"


def test_secret_requires_value_and_matching_confirmation():
    prompter, output = make_prompter(secrets=["", "pw", "typo", "pw", "pw"])

    assert prompter.ask(SecretRequest("Password:", confirm=True)) == "pw"
    assert output == ["Please enter a password", "Passwords do not match"]


def test_secret_without_confirmation():
    prompter, _ = make_prompter(secrets=["pw"])
    assert prompter.ask(SecretRequest("Password:")) == "pw"


def test_interrupt_propagates():
    def interrupted(prompt=""):
        raise KeyboardInterrupt

    prompter = TerminalPrompter(input_func=interrupted, output=lambda m: None)
    with pytest.raises(KeyboardInterrupt):
        prompter.ask(TextRequest("Word:"))
