import json

from django.test import SimpleTestCase

from downloads.exceptions import ManifestError
from downloads.manifest import ManifestEntry, decode_manifest

# Shape produced by the batch download page, including keys we ignore
STORED_MANIFEST = (
    '[{"S3Path":"1\\/p23216.tf_A89A5199.Avis_Rent_A_Car_Print_Reservation.pdf",'
    '"FileVersionId":"4164","FileName":"Avis Rent A Car_ Print Reservation.pdf",'
    '"ProjectName":"Superman","ProjectId":"23216","Folder":"","FileId":"4169"},'
    '{"modified":"2015-07-18T02:05:04Z","S3Path":"1\\/p23216.tf_351310E0.a1.jpg",'
    '"FileVersionId":"4165","FileName":"a1.jpg","ProjectName":"Superman",'
    '"ProjectId":"23216","Folder":"Level 1\\/Level 2 x\\/Level 3","FileId":"4170"}]'
)


class DecodeManifestTests(SimpleTestCase):

    def test_stored_payload(self):
        manifest = decode_manifest(STORED_MANIFEST)

        self.assertEqual(len(manifest), 2)
        self.assertEqual(
            manifest[0],
            ManifestEntry(
                file_name="Avis Rent A Car_ Print Reservation.pdf",
                folder="",
                remote_path="1/p23216.tf_A89A5199.Avis_Rent_A_Car_Print_Reservation.pdf",
                file_id=4169,
                project_id=23216,
                project_name="Superman",
                modified="",
            ),
        )
        self.assertEqual(manifest[1].folder, "Level 1/Level 2 x/Level 3")
        self.assertEqual(manifest[1].file_id, 4170)

    def test_keys_match_case_insensitively(self):
        manifest = decode_manifest(STORED_MANIFEST)
        self.assertEqual(manifest[1].modified, "2015-07-18T02:05:04Z")

    def test_exact_key_wins(self):
        payload = json.dumps([{"Modified": "2020-01-01T00:00:00Z", "modified": "bogus"}])
        self.assertEqual(decode_manifest(payload)[0].modified, "2020-01-01T00:00:00Z")

    def test_bytes_payload_and_numbers(self):
        payload = json.dumps([{"FileName": "ü.txt", "S3Path": "k", "FileId": 5, "ProjectId": 0}]).encode("utf-8")
        entry = decode_manifest(payload)[0]
        self.assertEqual(entry.file_name, "ü.txt")
        self.assertEqual(entry.file_id, 5)
        self.assertEqual(entry.project_id, 0)

    def test_missing_and_null_fields_default(self):
        entry = decode_manifest('[{"FileName": null}]')[0]
        self.assertEqual(entry, ManifestEntry())

    def test_order_is_preserved(self):
        payload = json.dumps([{"FileName": str(i), "S3Path": str(i)} for i in range(20)])
        self.assertEqual(
            [e.file_name for e in decode_manifest(payload)],
            [str(i) for i in range(20)],
        )

    def test_odd_characters_do_not_reject_the_manifest(self):
        payload = (
            '[{"FileName": "a\\u0000b.txt", "S3Path": "k"}, '
            '{"FileName": "c\\ud800.txt", "Folder": "x\\u0000", "S3Path": "k2"}, '
            '{"FileName": "ok.txt", "S3Path": "k3"}]'
        )

        manifest = decode_manifest(payload)

        self.assertEqual(
            [e.file_name for e in manifest],
            ["a\x00b.txt", "c\ud800.txt", "ok.txt"],
        )
        self.assertEqual(manifest[1].folder, "x\x00")

    def test_empty_array(self):
        self.assertEqual(decode_manifest("[]"), ())

    def test_manifest_is_immutable(self):
        manifest = decode_manifest(STORED_MANIFEST)
        self.assertIsInstance(manifest, tuple)
        with self.assertRaises(AttributeError):
            manifest[0].file_name = "other"

    def test_undecodable_payloads(self):
        for payload in (
            "not json",
            "{}",
            '{"FileName": "a"}',
            "null",
            '["a", "b"]',
            '[{"FileId": "abc"}]',
            '[{"ProjectId": "1.5"}]',
            '[{"FileName": ["a"]}]',
            b"\xff\xfe",
        ):
            with self.subTest(payload=payload):
                with self.assertRaises(ManifestError):
                    decode_manifest(payload)
