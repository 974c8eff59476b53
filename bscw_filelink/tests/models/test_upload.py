from bscw_filelink.exceptions import ErrorKind, InvalidFolderError
from bscw_filelink.models.upload import Credentials, UploadResult, UploadState


def test_credentials_repr_hides_password() -> None:
    credentials = Credentials(username="alice", password="s3cret")

    assert "s3cret" not in repr(credentials)
    assert "alice" in repr(credentials)


def test_done_result() -> None:
    result = UploadResult.done("https://h/pub/1")

    assert result.state == UploadState.DONE
    assert result.error_kind is None
    assert result.to_host_response() == {"aborted": False, "url": "https://h/pub/1"}


def test_aborted_result() -> None:
    result = UploadResult.aborted()

    assert result.error_kind == ErrorKind.UPLOAD_ABORTED
    assert result.to_host_response() == {"aborted": True, "url": ""}


def test_failed_result_exposes_error_kind() -> None:
    result = UploadResult.failed(InvalidFolderError())

    assert result.state == UploadState.FAILED
    assert result.error_kind == ErrorKind.INVALID_FOLDER


def test_terminal_states() -> None:
    terminal = {state for state in UploadState if state.is_terminal}

    assert terminal == {UploadState.DONE, UploadState.ABORTED, UploadState.FAILED}
