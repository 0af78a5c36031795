import unittest

from tcsig.config import CapiOptions
from tcsig.request import FORM_CONTENT_TYPE, build_v1_request, build_v3_request
from tcsig.signer_v1 import sign_v1
from tcsig.signer_v3 import sign_v3

FIXED_TIMESTAMP = 1609459200

V3_HEADERS = {
    'Content-Type',
    'Authorization',
    'Host',
    'X-TC-Action',
    'X-TC-Version',
    'X-TC-Timestamp',
    'X-TC-Region',
}


class TestRequestAssembly(unittest.TestCase):
    def setUp(self) -> None:
        self.options = CapiOptions(service_type='cvm', secret_id='AKIDtestid', secret_key='testkey')

    def test_v3_descriptor(self) -> None:
        signed = sign_v3({'Limit': 1}, self.options, timestamp=FIXED_TIMESTAMP)
        descriptor = build_v3_request(signed, 'DescribeInstances', '2017-03-12', self.options)

        self.assertEqual(descriptor.method, 'POST')
        self.assertEqual(descriptor.url, 'https://cvm.ap-guangzhou.api.qcloud.com/')
        self.assertIs(descriptor.body, signed.body)
        self.assertEqual(set(descriptor.headers), V3_HEADERS)
        self.assertEqual(descriptor.headers['Content-Type'], 'application/json')
        self.assertEqual(descriptor.headers['Authorization'], signed.authorization)
        self.assertEqual(descriptor.headers['Host'], 'cvm.ap-guangzhou.api.qcloud.com')
        self.assertEqual(descriptor.headers['X-TC-Action'], 'DescribeInstances')
        self.assertEqual(descriptor.headers['X-TC-Version'], '2017-03-12')
        self.assertEqual(descriptor.headers['X-TC-Timestamp'], '1609459200')
        self.assertEqual(descriptor.headers['X-TC-Region'], 'ap-guangzhou')
        self.assertTrue(descriptor.verify)
        self.assertIsNone(descriptor.timeout)

    def test_v3_optional_headers(self) -> None:
        options = self.options.merge(token='session-token', request_client='my-service', timeout=5)
        signed = sign_v3({}, options, timestamp=FIXED_TIMESTAMP)
        descriptor = build_v3_request(signed, 'DescribeInstances', None, options)

        self.assertEqual(set(descriptor.headers), V3_HEADERS | {'X-TC-Token', 'X-TC-RequestClient'})
        self.assertEqual(descriptor.headers['X-TC-Token'], 'session-token')
        self.assertEqual(descriptor.headers['X-TC-RequestClient'], 'my-service')
        self.assertEqual(descriptor.headers['X-TC-Version'], '2018-03-21')
        self.assertEqual(descriptor.timeout, 5)

    def test_v3_relaxed_tls_is_opt_in(self) -> None:
        options = self.options.merge(verify_tls=False)
        signed = sign_v3({}, options, timestamp=FIXED_TIMESTAMP)

        self.assertFalse(build_v3_request(signed, 'A', 'B', options).verify)

    def test_v1_post_uses_form_body(self) -> None:
        signed = sign_v1({'Action': 'DescribeInstances'}, self.options, timestamp=FIXED_TIMESTAMP, nonce=1)
        descriptor = build_v1_request(signed, self.options)

        self.assertEqual(descriptor.method, 'POST')
        self.assertEqual(descriptor.url, 'https://cvm.api.qcloud.com/')
        self.assertEqual(descriptor.body, signed.sign_path)
        self.assertEqual(descriptor.headers, {'Content-Type': FORM_CONTENT_TYPE})

    def test_v1_get_uses_query_string(self) -> None:
        options = self.options.merge(method='GET')
        signed = sign_v1({'Action': 'DescribeInstances'}, options, timestamp=FIXED_TIMESTAMP, nonce=1)
        descriptor = build_v1_request(signed, options)

        self.assertEqual(descriptor.method, 'GET')
        self.assertEqual(descriptor.url, f'https://cvm.api.qcloud.com/?{signed.sign_path}')
        self.assertIsNone(descriptor.body)
        self.assertEqual(descriptor.headers, {})

    def test_to_dict_decodes_body(self) -> None:
        signed = sign_v3({'Limit': 1}, self.options, timestamp=FIXED_TIMESTAMP)
        rendered = build_v3_request(signed, 'A', 'B', self.options).to_dict()

        self.assertEqual(rendered['body'], '{"Limit":1}')
        self.assertEqual(rendered['method'], 'POST')


if __name__ == '__main__':
    unittest.main(verbosity=2)
