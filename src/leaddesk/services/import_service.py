"""
CSV lead import service.

One run: decode and validate every row, group rows by category name, then for
each group resolve (or create) the category, bulk insert its leads, link them
to the category and insert their competitors. Groups are independent: a failure
in one is recorded and the run moves on to the next. Nothing is rolled back.
"""
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple, Union

from pydantic import BaseModel

from leaddesk.core.config import settings
from leaddesk.database.models.database import LeadStatus
from leaddesk.repositories.lead_store import LeadStore
from leaddesk.schemas.categories import CategoryRecord, LeadCategoryLink
from leaddesk.schemas.imports import GroupError, GroupOutcome, ImportResult
from leaddesk.schemas.leads import CompetitorCreate, LeadRecord
from leaddesk.services.csv_parser import OPTIONAL_FIELDS, ParsedLead, normalize_row, read_csv_rows
from leaddesk.utils.exceptions import ValidationError
from leaddesk.utils.logging import get_logger, app_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[str], None]


class ImportOptions(BaseModel):
    """
    How an import run maps rows onto categories and leads.

    Use one of the constructors rather than filling fields by hand:
    `ImportOptions.for_category("Plumbers")` sends every row to one named
    category, `ImportOptions.grouped_by_column("query")` reads the category
    from a column of each row.
    """
    category_name: Optional[str] = None
    category_column: Optional[str] = None
    default_status: LeadStatus = LeadStatus.FRESH.value
    fields: FrozenSet[str] = OPTIONAL_FIELDS

    class Config:
        use_enum_values = True

    @classmethod
    def for_category(
        cls,
        name: str,
        default_status: Optional[str] = None,
        fields: Optional[FrozenSet[str]] = None,
    ) -> "ImportOptions":
        """Every row goes to the category with this exact name"""
        return cls(
            category_name=name,
            default_status=default_status or settings.importer.default_status,
            fields=frozenset(fields) if fields is not None else OPTIONAL_FIELDS,
        )

    @classmethod
    def grouped_by_column(
        cls,
        column: Optional[str] = None,
        default_status: Optional[str] = None,
        fields: Optional[FrozenSet[str]] = None,
    ) -> "ImportOptions":
        """Each row's category is the value of `column` (default: the configured category column)"""
        return cls(
            category_column=column or settings.importer.category_column,
            default_status=default_status or settings.importer.default_status,
            fields=frozenset(fields) if fields is not None else OPTIONAL_FIELDS,
        )

    @property
    def explicit_category(self) -> Optional[str]:
        if self.category_name is None:
            return None
        return self.category_name.strip()


def format_summary(total_leads: int, categories_created: int) -> str:
    return f"Imported {total_leads} leads across {categories_created} new categories"


class LeadImportService:
    """Runs CSV imports against a LeadStore"""

    def __init__(self, store: LeadStore, progress: Optional[ProgressCallback] = None):
        self.store = store
        self.progress = progress

    def _report(self, message: str) -> None:
        logger.info(f"[cyan]{message}[/cyan]")
        if self.progress is not None:
            self.progress(message)

    def parse(self, content: Union[bytes, str], options: ImportOptions) -> Dict[str, List[ParsedLead]]:
        """
        Decode and validate a file, grouped by category name.

        Raises:
            CSVParseError: the file isn't decodable CSV
            ValidationError: bad options, or no row survived validation

        Returns:
            Category name -> rows, in order of first appearance
        """
        explicit = options.explicit_category
        if options.category_name is not None and not explicit:
            raise ValidationError("Please provide a category name.")
        if explicit is None and not options.category_column:
            raise ValidationError("Either a category name or a category column is required.")

        rows = read_csv_rows(content)

        groups: Dict[str, List[ParsedLead]] = {}
        skipped = 0
        for row in rows:
            parsed = normalize_row(
                row,
                default_status=options.default_status,
                fields=options.fields,
                category_column=None if explicit else options.category_column,
            )
            if parsed is None:
                skipped += 1
                continue
            key = explicit if explicit else parsed.category
            groups.setdefault(key, []).append(parsed)

        if skipped:
            logger.debug(f"[dim]Skipped {skipped} rows missing required fields[/dim]")

        if not groups:
            if explicit:
                raise ValidationError("No leads with a name were found in the CSV file.")
            raise ValidationError(
                f"No valid rows found with '{options.category_column}' and 'name' columns."
            )
        return groups

    async def import_csv(self, content: Union[bytes, str], options: ImportOptions) -> ImportResult:
        """
        Import a CSV file.

        Parse and validation problems raise before anything is written. After
        that, failures are per category group and land in `result.errors`.

        Args:
            content: Raw file content with a header row
            options: Category mapping, default status and field set

        Returns:
            ImportResult with totals, per-group outcomes and errors
        """
        self._report("Analyzing CSV data...")
        groups = self.parse(content, options)
        self._report(f"Found {len(groups)} unique categories to process...")
        app_logger.info(
            f"[cyan]Starting import:[/cyan] {sum(len(rows) for rows in groups.values())} leads "
            f"in {len(groups)} categories"
        )

        result = ImportResult()
        for category_name, parsed_rows in groups.items():
            self._report(f"Processing category: {category_name} ({len(parsed_rows)} leads)...")
            outcome = await self.import_group(category_name, parsed_rows, result)
            result.groups.append(outcome)

        result.summary = format_summary(result.total_leads_imported, result.categories_created)
        if result.errors:
            app_logger.warning(
                f"[yellow]⚠️  {result.summary}[/yellow] "
                f"([red]{len(result.failed_categories)}[/red] categories failed, "
                f"{len(result.errors)} errors)"
            )
        else:
            app_logger.info(f"[green]✅ {result.summary}[/green]")
        return result

    async def resolve_category(self, name: str) -> Tuple[CategoryRecord, bool]:
        """
        Look a category up by exact name, creating it when missing.

        Returns:
            (category, created)
        """
        category = await self.store.find_category(name)
        if category is not None:
            logger.debug(f"[dim]Reusing category[/dim] {name!r} (id={category.id})")
            return category, False
        category = await self.store.create_category(name)
        logger.info(f"[green]Created category[/green] [bold cyan]{name}[/bold cyan] (id={category.id})")
        return category, True

    async def import_group(
        self,
        category_name: str,
        parsed_rows: List[ParsedLead],
        result: ImportResult,
    ) -> GroupOutcome:
        """Run one category group; errors are appended to `result`, never raised"""
        outcome = GroupOutcome(category=category_name, rows=len(parsed_rows))

        def fail(stage: str, error: Exception, fatal: bool = True) -> None:
            message = getattr(error, "detail", None) or str(error) or error.__class__.__name__
            result.errors.append(
                GroupError(category=category_name, stage=stage, message=str(message), fatal=fatal)
            )
            if fatal:
                logger.error(f"[red]❌ Category {category_name!r} failed at {stage}:[/red] {message}")
            else:
                logger.warning(f"[yellow]⚠️  Category {category_name!r}: {stage} failed:[/yellow] {message}")

        try:
            category, created = await self.resolve_category(category_name)
        except Exception as e:
            fail("resolve", e)
            return outcome

        if created:
            outcome.category_created = True
            result.categories_created += 1
            result.created_category_names.append(category_name)

        try:
            inserted: List[LeadRecord] = await self.store.bulk_insert_leads(
                [parsed.lead for parsed in parsed_rows]
            )
        except Exception as e:
            fail("insert_leads", e)
            return outcome

        # Links and competitors are matched to the returned ids by position
        if len(inserted) != len(parsed_rows):
            fail(
                "insert_leads",
                RuntimeError(f"store returned {len(inserted)} rows for {len(parsed_rows)} leads"),
            )
            return outcome

        outcome.imported = len(inserted)
        result.total_leads_imported += len(inserted)

        try:
            await self.store.bulk_insert_links(
                [LeadCategoryLink(lead_id=lead.id, category_id=category.id) for lead in inserted]
            )
        except Exception as e:
            fail("link", e, fatal=False)

        competitors = [
            CompetitorCreate(lead_id=lead.id, **competitor.model_dump())
            for lead, parsed in zip(inserted, parsed_rows)
            for competitor in parsed.competitors
        ]
        if competitors:
            try:
                await self.store.bulk_insert_competitors(competitors)
                outcome.competitors_imported = len(competitors)
            except Exception as e:
                fail("competitors", e, fatal=False)

        logger.info(
            f"[green]✅ {category_name}:[/green] [cyan]{outcome.imported}[/cyan] leads, "
            f"{outcome.competitors_imported} competitors"
        )
        return outcome
