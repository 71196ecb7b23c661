from pathlib import Path

import pytest

from schema_types_to_code import (
    AtomicWriter,
    CodeGeneratorConfig,
    OutputConfig,
    OutputMode,
    PipelineGenerator,
    RemoveDuplicate,
    load_definitions,
    load_definitions_file,
)
from schema_types_to_code.pipeline.errors import NamingCollisionError

BLOG = Path(__file__).parent / "test_data" / "blog.definitions.json"


@pytest.fixture
def blog():
    return load_definitions_file(BLOG)


def full_config(**kwargs):
    return CodeGeneratorConfig(
        combine_scalar_filters=True,
        atomic_number_operations=False,
        remove_duplicate_types=RemoveDuplicate.ALL,
        **kwargs,
    )


class TestPipelineGenerator:
    """End to end generation"""

    def test_generate_blog(self, blog):
        files = PipelineGenerator(blog, full_config(), "// Generated").generate()

        assert "user/user.model.ts" in files
        assert "prisma/int-filter.input.ts" in files
        assert "index.ts" in files
        for path, text in files.items():
            assert "nullable" not in path
            assert "nullable" not in text.lower(), path
            assert "FieldUpdateOperationsInput" not in text
            assert text.startswith("// Generated\n")

        post = files["post/post.model.ts"]
        assert "import { User } from '../user/user.model';" in post
        assert "    author!: User | null;" in post

        aggregate_args = files["user/aggregate-user.args.ts"]
        assert "    _avg?: UserAvgAggregateInput;" in aggregate_args
        assert "    _sum?: UserAvgAggregateInput;" in aggregate_args

        user_index = files["user/index.ts"]
        assert "export { AggregateUser } from './aggregate-user.output';" in user_index
        assert "UserUpdateManyMutationInput" not in user_index

    def test_mutate_and_assemble_are_cached(self, blog):
        generator = PipelineGenerator(blog, full_config())
        assert generator.mutate() is generator.mutate()
        assert generator.assemble() is generator.assemble()

    def test_default_config_renders_every_definition(self, blog):
        files = PipelineGenerator(blog).generate()
        declaration_files = [path for path in files if not path.endswith("index.ts")]
        assert len(declaration_files) == len(blog) + len(blog.enums)

    def test_write(self, blog, tmp_path):
        written = PipelineGenerator(blog, full_config()).write(tmp_path)

        assert tmp_path / "user" / "user.model.ts" in written
        assert (tmp_path / "index.ts").read_text().startswith("export {")
        assert not list(tmp_path.rglob("*.tmp"))

    def test_existing_files_abort_before_writing(self, blog, tmp_path):
        (tmp_path / "user").mkdir()
        (tmp_path / "user" / "user.model.ts").write_text("keep me")

        with pytest.raises(FileExistsError):
            PipelineGenerator(blog, full_config()).write(tmp_path)
        assert (tmp_path / "user" / "user.model.ts").read_text() == "keep me"
        assert not (tmp_path / "index.ts").exists()

    def test_force_overwrites(self, blog, tmp_path):
        (tmp_path / "index.ts").write_text("old")
        config = full_config(output=OutputConfig(mode=OutputMode.FORCE))
        PipelineGenerator(blog, config).write(tmp_path)
        assert (tmp_path / "index.ts").read_text() != "old"

    def test_failure_writes_nothing(self, blog, tmp_path):
        # Without {type}, AggregateUser and AggregateUserArgs share user/aggregate-user.ts
        config = full_config(output_file_pattern="{model}/{name}.ts")
        with pytest.raises(NamingCollisionError):
            PipelineGenerator(blog, config).write(tmp_path)
        assert list(tmp_path.iterdir()) == []


class TestAtomicWriter:
    """Test the file writer"""

    def test_write_creates_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "c.ts"
        AtomicWriter().write(target, "content")
        assert target.read_text() == "content"

    def test_non_atomic_write(self, tmp_path):
        writer = AtomicWriter(OutputConfig(atomic_write=False))
        writer.write(tmp_path / "c.ts", "content")
        assert (tmp_path / "c.ts").read_text() == "content"

    def test_write_all_returns_sorted_paths(self, tmp_path):
        written = AtomicWriter().write_all(tmp_path, {"b/x.ts": "x", "a.ts": "a"})
        assert written == [tmp_path / "a.ts", tmp_path / "b" / "x.ts"]


class TestRenamedModelPlacement:
    def test_renamed_model_stays_with_its_inputs(self):
        definitions = load_definitions(
            {
                "types": [
                    {"name": "Query", "kind": "model", "fields": [{"name": "id", "type": {"scalar": "Int"}}]},
                    {
                        "name": "QueryWhereInput",
                        "kind": "input",
                        "sourceEntity": "Query",
                        "fields": [{"name": "parent", "type": {"type": "Query"}, "nullable": True}],
                    },
                ]
            }
        )
        files = PipelineGenerator(definitions, CodeGeneratorConfig(rename_zoo_types=True)).generate()

        assert "query/query-type.model.ts" in files
        assert "query/query-where.input.ts" in files
        assert "import { QueryType } from './query-type.model';" in files["query/query-where.input.ts"]
