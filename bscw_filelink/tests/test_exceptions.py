from bscw_filelink.exceptions import (
    AccountIncompleteError,
    CredentialsInvalidError,
    ErrorKind,
    FilelinkError,
    InvalidFolderError,
    NetworkCommunicationError,
    NoPermissionError,
    NoValidCredentialsProvidedError,
    UnexpectedStatusError,
    UploadAbortedError,
)


def test_filelink_error_str_without_context() -> None:
    error = FilelinkError("Something failed")

    assert str(error) == "Something failed"


def test_filelink_error_str_with_context() -> None:
    error = FilelinkError("Failed", url="https://h/x", attempt=3)

    assert "Failed" in str(error)
    assert "url='https://h/x'" in str(error)
    assert "attempt=3" in str(error)


def test_status_errors_carry_their_status_code() -> None:
    assert CredentialsInvalidError().status_code == 401
    assert NoPermissionError().status_code == 403
    assert InvalidFolderError().status_code == 404


def test_every_error_has_a_distinct_kind() -> None:
    kinds = {
        UploadAbortedError().kind,
        NoValidCredentialsProvidedError().kind,
        CredentialsInvalidError().kind,
        InvalidFolderError().kind,
        NoPermissionError().kind,
        NetworkCommunicationError("boom").kind,
        AccountIncompleteError(account_id="a").kind,
    }

    assert kinds == set(ErrorKind)


def test_unexpected_status_is_a_network_communication_error() -> None:
    error = UnexpectedStatusError("Invalid HTTP status code was returned: 500", status_code=500)

    assert isinstance(error, NetworkCommunicationError)
    assert error.kind == ErrorKind.NETWORK_COMMUNICATION
    assert error.status_code == 500


def test_upload_aborted_keeps_file_id() -> None:
    error = UploadAbortedError(file_id="file-1")

    assert error.file_id == "file-1"
    assert "file_id='file-1'" in str(error)
