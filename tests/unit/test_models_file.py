import pytest

from modelfile_scanner.models.file import ModelFile
from modelfile_scanner.scanner import (
    DirectiveTable,
    InvalidRoleError,
    MessageRole,
    MissingBaseError,
    Record,
    ScanState,
    UnterminatedMultilineError,
)


def test_model_file_basic() -> None:
    mf = ModelFile()
    mf.set_base("llama")
    mf.set_parameter("foo", "bar")
    mf.set_system("sys")
    mf.set_template("tmpl")
    mf.set_adapter("adpt")
    mf.set_license("MIT")
    mf.add_message("user", "hi")
    rendered = mf.render()
    assert "FROM llama" in rendered
    assert "PARAMETER foo bar" in rendered
    assert "SYSTEM sys" in rendered
    assert "MESSAGE user hi" in rendered


def test_builder_chaining() -> None:
    mf = (
        ModelFile()
        .set_base("llama3.2")
        .set_parameter("temperature", "0.7")
        .set_system("Be helpful")
        .set_template("{{ .Prompt }}")
        .set_adapter("./lora.gguf")
        .set_license("MIT")
        .add_message(MessageRole.USER, "Hello")
    )
    assert mf.base == "llama3.2"
    assert mf.messages == [{"role": "user", "content": "Hello"}]


def test_add_message_rejects_unknown_role() -> None:
    with pytest.raises(InvalidRoleError):
        ModelFile().add_message("tool", "42")


def test_set_parameter_rejects_invalid_name() -> None:
    with pytest.raises(ValueError, match="invalid parameter name"):
        ModelFile().set_parameter("top-k", "40")


# -- from_string --------------------------------------------------------------


def test_from_string_basic() -> None:
    text = 'FROM llama3.2\nPARAMETER temperature 0.7\nSYSTEM """You are helpful."""'
    mf = ModelFile.from_string(text)
    assert mf.base == "llama3.2"
    assert mf.parameters["temperature"] == "0.7"
    assert mf.system == "You are helpful."


def test_from_string_keeps_values_as_text() -> None:
    mf = ModelFile.from_string("FROM llama\nPARAMETER num_ctx 4096\nPARAMETER temperature warm\n")
    assert mf.parameters == {"num_ctx": "4096", "temperature": "warm"}


def test_from_string_multiple_stop() -> None:
    text = (
        "FROM llama\n"
        'PARAMETER stop "<|start_header_id|>"\n'
        'PARAMETER stop "<|end_header_id|>"\n'
        'PARAMETER stop "<|eot_id|>"\n'
    )
    mf = ModelFile.from_string(text)
    assert mf.parameters["stop"] == ['"<|start_header_id|>"', '"<|end_header_id|>"', '"<|eot_id|>"']


def test_from_string_multiline_fields() -> None:
    text = (
        'FROM llama\nTEMPLATE """\n{{ .System }}\n{{ .Prompt }}\n"""\n'
        'LICENSE """\nMIT License\nCopyright 2025\n"""\n'
        'MESSAGE user """\nHello\nWorld\n"""'
    )
    mf = ModelFile.from_string(text)
    assert mf.template == "\n{{ .System }}\n{{ .Prompt }}\n"
    assert mf.license == "\nMIT License\nCopyright 2025\n"
    assert mf.messages == [{"role": "user", "content": "\nHello\nWorld\n"}]


def test_from_string_single_line_messages() -> None:
    text = (
        "FROM llama\n"
        "MESSAGE user Is Toronto in Canada?\n"
        "MESSAGE assistant yes\n"
        "MESSAGE user Is Sacramento in Canada?\n"
        "MESSAGE assistant no\n"
    )
    mf = ModelFile.from_string(text)
    assert len(mf.messages) == 4
    assert mf.messages[0] == {"role": "user", "content": "Is Toronto in Canada?"}
    assert mf.messages[1] == {"role": "assistant", "content": "yes"}


def test_from_string_unknown_directive_is_parameter() -> None:
    mf = ModelFile.from_string("FROM llama\nREQUIRES 0.14.0")
    assert mf.parameters["requires"] == "0.14.0"


def test_from_string_table_directive_without_field() -> None:
    table = DirectiveTable(directives=("model", "adapter", "license", "template", "system", "message", "requires"))
    mf = ModelFile.from_string("FROM llama\nREQUIRES 0.14.0", table)
    assert mf.commands == [Record("requires", "0.14.0")]
    assert "REQUIRES 0.14.0" in mf.render()


def test_from_string_errors_propagate() -> None:
    with pytest.raises(MissingBaseError):
        ModelFile.from_string("PARAMETER seed 42")
    with pytest.raises(UnterminatedMultilineError):
        ModelFile.from_string('FROM llama\nSYSTEM """oops')


def test_ollama_docs_example() -> None:
    """Parse the Mario example from Ollama's Modelfile documentation."""
    text = """FROM llama3.2
# sets the temperature to 1 [higher is more creative, lower is more coherent]
PARAMETER temperature 1
# sets the context window size to 4096
PARAMETER num_ctx 4096

# sets a custom system message to specify the behavior of the chat assistant
SYSTEM You are Mario from super mario bros, acting as an assistant.
"""
    mf = ModelFile.from_string(text)
    assert mf.base == "llama3.2"
    assert mf.parameters == {"temperature": "1", "num_ctx": "4096"}
    assert mf.system == "You are Mario from super mario bros, acting as an assistant."


def test_from_file(tmp_path) -> None:
    path = tmp_path / "Modelfile"
    path.write_text('FROM llama3.2\nSYSTEM """\nBe brief.\n"""\n', encoding="utf-8")
    mf = ModelFile.from_file(path)
    assert mf.base == "llama3.2"
    assert mf.system == "\nBe brief.\n"


# -- render -------------------------------------------------------------------


def test_render_multiple_stop() -> None:
    mf = ModelFile().set_base("llama").set_parameter("stop", "<|start|>").set_parameter("stop", "<|end|>")
    rendered = mf.render()
    assert rendered.count("PARAMETER stop") == 2
    assert "<|start|>" in rendered
    assert "<|end|>" in rendered


def test_render_round_trip() -> None:
    mf = (
        ModelFile()
        .set_base("llama3.2")
        .set_parameter("stop", "<|eot_id|>")
        .set_parameter("stop", "<|end|>")
        .set_parameter("seed", "42")
        .set_system("You are\na pirate.")
        .set_template("{{ .Prompt }}")
        .add_message("user", "Ahoy?")
        .add_message("assistant", "Arr.\n")
    )
    again = ModelFile.from_string(mf.render())
    assert again.to_records() == mf.to_records()
    assert again.parameters == mf.parameters
    assert again.messages == mf.messages


def test_to_records_order() -> None:
    mf = ModelFile().add_message("user", "hi").set_system("sys").set_base("llama").set_parameter("seed", "1")
    assert [record.name for record in mf.to_records()] == ["model", "seed", "system", "message"]


def test_from_string_message_named_parameter() -> None:
    mf = ModelFile.from_string("FROM foo\nPARAMETER message hi\n")
    assert mf.parameters == {"message": "hi"}
    assert mf.messages == []
    assert "PARAMETER message hi" in mf.render()
    assert ModelFile.from_string(mf.render()).parameters == {"message": "hi"}


def test_custom_table_names() -> None:
    table = DirectiveTable(
        routes={"parameter": ScanState.PARAMETER_KEY, "chat": ScanState.MESSAGE_ROLE},
        directives=("model", "adapter", "license", "template", "chat"),
    )
    mf = ModelFile.from_string("FROM foo\nCHAT user hi\nSYSTEM terse\n", table)
    assert mf.messages == [{"role": "user", "content": "hi"}]
    assert mf.system is None
    assert mf.parameters == {"system": "terse"}
    rendered = mf.render()
    assert "CHAT user hi" in rendered
    assert "PARAMETER system terse" in rendered


def test_add_message_without_message_directive() -> None:
    table = DirectiveTable(routes={"parameter": ScanState.PARAMETER_KEY})
    with pytest.raises(LookupError, match="no message directive"):
        ModelFile(table).add_message("user", "hi")
