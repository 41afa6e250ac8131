"""SQL statements against the billing database.

Columns are aliased to the field names the normalizers expect, so the rows
come back ready to normalize. Every statement takes ``?`` parameters.
"""

ACCOUNT_TABLE_NAME = "[dbo].[CUST_DTL]"
CUSTOMER_TABLE_NAME = "[dbo].[customerpaymentsdetails]"
USER_TABLE_NAME = "[dbo].[users]"
CURRENT_BILL_TABLE_NAME = "[dbo].[spotbillsimported]"
PREVIOUS_BILL_TABLE_NAME = "[dbo].[spotbillsimportedprevious]"
BILL_HISTORY_TABLE_NAME = "[dbo].[spotbillsimportedstatement]"

USER_DETAILS_QUERY = f"""
SELECT
  LTRIM(RTRIM(u.accountno)) AS number,
  CONCAT(LTRIM(RTRIM(u.firstname)), ' ', LTRIM(RTRIM(u.sirname))) AS name,
  LTRIM(RTRIM(u.phoneno)) AS phone,
  LTRIM(RTRIM(u.email)) AS email,
  LTRIM(RTRIM(u.dater)) AS verifiedAt
FROM {USER_TABLE_NAME} AS u
WHERE UPPER(LTRIM(RTRIM(u.accountno))) = ?
"""

ACCOUNT_DETAILS_QUERY = f"""
SELECT
  LTRIM(RTRIM(a.CUSTKEY)) AS number,
  CONCAT(LTRIM(RTRIM(a.INITIAL)), ' ', LTRIM(RTRIM(a.SURNAME))) AS name,
  LTRIM(RTRIM(a.CELL_TEL_NO)) AS phone,
  LTRIM(RTRIM(a.UA_ADRESS1)) AS plot,
  LTRIM(RTRIM(a.UA_ADDRESS3)) AS neighborhood,
  LTRIM(RTRIM(a.UA_ADDRESS4)) AS city
FROM {ACCOUNT_TABLE_NAME} AS a
WHERE UPPER(LTRIM(RTRIM(a.CUSTKEY))) = ?
"""

CUSTOMER_DETAILS_QUERY = f"""
SELECT
  SUBSTRING(LTRIM(RTRIM(c.DEPM_CODE)), 1, 1) AS jurisdiction,
  LTRIM(RTRIM(c.CUSTKEY)) AS number,
  LTRIM(RTRIM(c.METER_REF)) AS identity,
  LTRIM(RTRIM(c.SURNAME)) AS name,
  LTRIM(RTRIM(c.CELL_TEL_NO)) AS phone,
  LTRIM(RTRIM(c.UA_ADRESS1)) AS plot,
  LTRIM(RTRIM(c.UA_ADRESS2)) AS house,
  LTRIM(RTRIM(c.UA_ADRESS3)) AS neighborhood,
  LTRIM(RTRIM(c.UA_ADRESS4)) AS city,
  LTRIM(RTRIM(c.X_GPS)) AS longitude,
  LTRIM(RTRIM(c.Y_GPS)) AS latitude,
  LTRIM(RTRIM(c.Balance)) AS balance
FROM {CUSTOMER_TABLE_NAME} AS c
WHERE UPPER(LTRIM(RTRIM(c.CUSTKEY))) = ?
   OR UPPER(LTRIM(RTRIM(c.METER_REF))) = ?
"""

_BILL_QUERY = """
SELECT TOP (?)
  LTRIM(RTRIM(b.CUSTKEY)) AS accountNumber,
  LTRIM(RTRIM(b.SMS_STATUS)) AS number,
  b.OPENING_BALANCE AS openBalance,
  b.CURRENT_BALANCE AS closeBalance,
  b.CURRENT_BALANCE AS outstandBalance,
  b.CURRENT_CHARGES AS currentCharges,
  b.CR_READING AS currentReading,
  b.PR_READING AS previousReading,
  b.DATE_OF_READING AS readingDate,
  b.CONSUMPTION AS consumption,
  LTRIM(RTRIM(b.CELL_TEL_NO)) AS phone,
  LTRIM(RTRIM(b.CONSUMER_TYPE_DESC)) AS category
FROM {table} AS b
WHERE UPPER(LTRIM(RTRIM(b.CUSTKEY))) = ?
ORDER BY b.DATE_OF_READING DESC
"""

CURRENT_BILL_QUERY = _BILL_QUERY.format(table=CURRENT_BILL_TABLE_NAME)
PREVIOUS_BILL_QUERY = _BILL_QUERY.format(table=PREVIOUS_BILL_TABLE_NAME)
BILL_HISTORY_QUERY = _BILL_QUERY.format(table=BILL_HISTORY_TABLE_NAME)

# DueDate is stored as free text with doubled spaces; collapse them before converting.
SHOULD_FETCH_QUERY = f"""
SELECT COUNT(*) AS count
FROM {CUSTOMER_TABLE_NAME} AS cu
WHERE (
  UPPER(LTRIM(RTRIM(cu.CUSTKEY))) = ?
  OR UPPER(LTRIM(RTRIM(cu.METER_REF))) = ?
)
AND (
  CONVERT(DATETIME, cu.LAST_PAY_DATE) > ?
  OR CONVERT(DATETIME, REPLACE(REPLACE(REPLACE(cu.DueDate, ' ', '*^'), '^*', ''), '*^', ' ')) > ?
)
"""

ACCOUNT_NUMBERS_QUERY = f"""
SELECT DISTINCT CUSTKEY AS accountNumber
FROM {ACCOUNT_TABLE_NAME}
ORDER BY CUSTKEY
OFFSET ? ROWS
FETCH NEXT ? ROWS ONLY
"""

ACCOUNT_COUNT_QUERY = f"SELECT COUNT(DISTINCT CUSTKEY) AS count FROM {ACCOUNT_TABLE_NAME}"
