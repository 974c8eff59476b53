ACCOUNT_ID = "account1"
BASE_URL = "https://bscw.example.org/bscw/bscw.cgi/7"
ORIGIN = "https://bscw.example.org"
PUBLIC_URL_PREFIX = "https://bscw.example.org/bscw/bscw.cgi/REST/publicURL/7"
USERNAME = "alice"
PASSWORD = "s3cret"
PUBLIC_LINK = "https://bscw.example.org/pub/bscw.cgi/d123/report.pdf"
FOLDER_NAME = "20240101T000000000"
