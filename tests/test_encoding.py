import unittest
from urllib.parse import unquote

from awsig.encoding import aws_percent_encode, encode_path, encode_query


class TestAwsPercentEncode(unittest.TestCase):

    def test_reserved_punctuation_is_escaped(self) -> None:
        self.assertEqual(aws_percent_encode("Az09-_.~!*'()"), 'Az09-_.~%21%2A%27%28%29')

    def test_email_address(self) -> None:
        self.assertEqual(aws_percent_encode('bob@example.com'), 'bob%40example.com')

    def test_space(self) -> None:
        self.assertEqual(aws_percent_encode('a b'), 'a%20b')

    def test_slash_is_escaped(self) -> None:
        self.assertEqual(aws_percent_encode('a/b'), 'a%2Fb')

    def test_multibyte_character(self) -> None:
        self.assertEqual(aws_percent_encode('\U0001F642'), '%F0%9F%99%82')

    def test_bytes_input(self) -> None:
        self.assertEqual(aws_percent_encode(b'\xe2\x82\xac'), '%E2%82%AC')

    def test_decoding_recovers_input(self) -> None:
        samples = [
            '',
            'plain',
            "!*'()",
            'key=value&other=1',
            'café 日本語',
            '\U0001F642 %20 + ~',
            '\t\n',
        ]
        for sample in samples:
            with self.subTest(sample=sample):
                self.assertEqual(unquote(aws_percent_encode(sample)), sample)


class TestEncodePath(unittest.TestCase):

    def test_segments_are_encoded_independently(self) -> None:
        self.assertEqual(encode_path('/prod/@connections/R0oX='), '/prod/%40connections/R0oX%3D')

    def test_escaped_path_is_encoded_again(self) -> None:
        self.assertEqual(encode_path('/my%20file.txt'), '/my%2520file.txt')

    def test_single_encoding_passes_path_through(self) -> None:
        self.assertEqual(encode_path('/folder//my%20file.txt', double_encode=False), '/folder//my%20file.txt')

    def test_empty_path(self) -> None:
        self.assertEqual(encode_path(''), '/')
        self.assertEqual(encode_path('', double_encode=False), '/')


class TestEncodeQuery(unittest.TestCase):

    def test_pairs_keep_their_order(self) -> None:
        body = encode_query([('Version', '2010-12-01'), ('Action', 'SendEmail'), ('Source', 'bob@example.com')])
        self.assertEqual(body, 'Version=2010-12-01&Action=SendEmail&Source=bob%40example.com')

    def test_empty(self) -> None:
        self.assertEqual(encode_query([]), '')

    def test_none_value_is_empty(self) -> None:
        self.assertEqual(encode_query([('uploads', None), ('max', 5)]), 'uploads=&max=5')


if __name__ == '__main__':
    unittest.main(verbosity=2)
