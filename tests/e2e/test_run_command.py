"""End-to-end tests for `genai-gateway run`."""

import base64

from genai_gateway.cli.main import app
from genai_gateway.routing.types import MediaType
from genai_gateway.service.chat_service import ChatMode, ChatResponse

PNG_BYTES = base64.b64decode("iVBORw0KGgo=")


def test_run_chat_prints_reply(cli_runner, mock_run_bootstrap):
    result = cli_runner.invoke(app, ["run", "chat", "hello"])

    assert result.exit_code == 0, result.output
    assert "Model: gemini-2.0-flash-exp" in result.output
    assert "Hello from the gateway" in result.output
    request = mock_run_bootstrap.service.handle.await_args.args[0]
    assert request.message == "hello"
    assert request.mode is ChatMode.CHAT


def test_run_chat_soft_failure_exits_2(cli_runner, mock_run_bootstrap):
    mock_run_bootstrap.service.handle.return_value = ChatResponse(
        success=False, text="❌ Chat failed: quota. Please try again.", mode=ChatMode.CHAT
    )

    result = cli_runner.invoke(app, ["run", "chat", "hello"])

    assert result.exit_code == 2
    assert "❌ Chat failed" in result.output


def test_run_analyze_reads_image_files(cli_runner, mock_run_bootstrap, tmp_path):
    image = tmp_path / "cat.png"
    image.write_bytes(PNG_BYTES)

    result = cli_runner.invoke(app, ["run", "analyze", str(image), "-m", "what breed?"])

    assert result.exit_code == 0, result.output
    request = mock_run_bootstrap.service.handle.await_args.args[0]
    assert request.images == ["data:image/png;base64,iVBORw0KGgo="]
    assert request.message == "what breed?"


def test_run_analyze_missing_file_fails(cli_runner, mock_run_bootstrap, tmp_path):
    result = cli_runner.invoke(app, ["run", "analyze", str(tmp_path / "nope.png")])

    assert result.exit_code == 1
    mock_run_bootstrap.service.handle.assert_not_awaited()


def test_run_generate_saves_output(cli_runner, mock_run_bootstrap, tmp_path):
    mock_run_bootstrap.service.handle.return_value = ChatResponse(
        success=True,
        text="IMAGE_GENERATED:data:image/png;base64,iVBORw0KGgo=",
        mode=ChatMode.GENERATE,
        model_used="core",
        source="stability",
    )
    output = tmp_path / "out.png"

    result = cli_runner.invoke(app, ["run", "generate", "a cat", "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert "Model: core via stability" in result.output
    assert output.read_bytes() == PNG_BYTES


def test_run_generate_video_flag(cli_runner, mock_run_bootstrap):
    cli_runner.invoke(app, ["run", "generate", "waves", "--video"])

    request = mock_run_bootstrap.service.handle.await_args.args[0]
    assert request.mode is ChatMode.GENERATE
    assert request.media_type is MediaType.VIDEO
