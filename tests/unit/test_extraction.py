"""Unit tests for the regex transaction extractor"""

import pytest
from datetime import datetime, timezone
from dhanrakshak.domain.exceptions import InvalidInputError
from dhanrakshak.domain.extraction import TransactionTextExtractor, parse_batch
from dhanrakshak.domain.models import (
    REGEX_CONFIDENCE,
    Bank,
    ParseFailure,
    ParseMethod,
    SmsMessage,
    TransactionMode,
    TransactionType,
)


RECEIVED_AT = datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)

HDFC_UPI_DEBIT = (
    "Rs.500 debited from a/c XX1234 on 01-01-24. Avl Bal: Rs.12,500.50. "
    "UPI Ref 123456789012 to swiggy@icici"
)


def test_parse_hdfc_upi_debit(extractor: TransactionTextExtractor):
    """Test full extraction of a typical UPI debit alert"""
    result = extractor.parse(HDFC_UPI_DEBIT, sender_id="HDFCBK", received_at=RECEIVED_AT)

    assert result.ok
    tx = result.transaction
    assert tx.type == TransactionType.DEBIT
    assert tx.amount == 500.0
    assert tx.balance_after == 12500.50
    assert tx.account_last4 == "1234"
    assert tx.merchant == "swiggy"
    assert tx.bank == Bank.HDFC
    assert tx.reference_id == "123456789012"
    assert tx.is_spam is False
    assert tx.transaction_mode == TransactionMode.UPI
    assert tx.parse_method == ParseMethod.REGEX
    assert tx.confidence == REGEX_CONFIDENCE
    assert tx.timestamp == RECEIVED_AT
    assert tx.raw_text == HDFC_UPI_DEBIT
    assert tx.is_debit and not tx.is_credit


def test_parse_neft_credit(extractor: TransactionTextExtractor):
    """Test credit alert: 'to your A/c' is not a merchant, the payer after 'from' is"""
    sms = (
        "INR 25,000.00 credited to your A/c XX5678 on 05-02-24 by NEFT from ACME CORP. "
        "Avl Bal INR 1,05,000.00"
    )
    tx = extractor.parse(sms).transaction

    assert tx.type == TransactionType.CREDIT
    assert tx.amount == 25000.0
    assert tx.balance_after == 105000.0
    assert tx.account_last4 == "5678"
    assert tx.merchant == "ACME"
    assert tx.transaction_mode == TransactionMode.NEFT
    assert tx.bank == Bank.UNKNOWN
    assert tx.reference_id is None


def test_promotional_message_is_not_transactional(extractor: TransactionTextExtractor):
    """Test promo text without a transaction verb fails the gate"""
    result = extractor.parse("Congratulations! You won a cashback offer, apply now!")

    assert not result.ok
    assert result.failure == ParseFailure.NOT_TRANSACTIONAL


def test_empty_message(extractor: TransactionTextExtractor):
    """Test blank input is reported as empty, not as non-transactional"""
    assert extractor.parse("").failure == ParseFailure.EMPTY_MESSAGE
    assert extractor.parse("   \n").failure == ParseFailure.EMPTY_MESSAGE


def test_non_string_body_is_rejected(extractor: TransactionTextExtractor):
    """Test a non-text body is an input error, not a parse outcome"""
    with pytest.raises(InvalidInputError):
        extractor.parse(None)


def test_gate_uses_substring_matching(extractor: TransactionTextExtractor):
    """Test 'rs' inside 'customers' satisfies the currency marker; the amount check then fails"""
    result = extractor.parse("Payment received. Thank you, dear customers")

    assert result.failure == ParseFailure.MISSING_AMOUNT


def test_gate_needs_both_verb_and_currency(extractor: TransactionTextExtractor):
    """Test a currency marker alone, or a verb alone, does not pass the gate"""
    assert extractor.parse("Your a/c balance is Rs.5,000 as of today").failure == ParseFailure.NOT_TRANSACTIONAL
    assert extractor.parse("Your payment of 500 was received").failure == ParseFailure.NOT_TRANSACTIONAL


def test_overflowing_amount_is_missing(extractor: TransactionTextExtractor):
    """Test a digit run too long for a float is not taken as an amount"""
    result = extractor.parse("Rs." + "9" * 400 + " debited from a/c XX1234")

    assert result.failure == ParseFailure.MISSING_AMOUNT


def test_overflowing_balance_is_dropped(extractor: TransactionTextExtractor):
    """Test an unrepresentable balance is left out while the transaction still parses"""
    result = extractor.parse("Rs.500 debited from a/c XX1234. Avl Bal: Rs." + "9" * 400)

    assert result.ok
    assert result.transaction.amount == 500.0
    assert result.transaction.balance_after is None


def test_zero_amount_is_missing(extractor: TransactionTextExtractor):
    """Test amount must be strictly positive"""
    assert extractor.parse("Rs.0 debited from your account").failure == ParseFailure.MISSING_AMOUNT


def test_first_amount_wins_over_balance(extractor: TransactionTextExtractor):
    """Test the transaction amount is the first currency amount, the later one is the balance"""
    tx = extractor.parse("Rs.1,000 debited. Avl bal Rs.50,000").transaction

    assert tx.amount == 1000.0
    assert tx.balance_after == 50000.0


def test_spam_is_flagged_but_still_parsed(extractor: TransactionTextExtractor):
    """Test spam keywords set the flag without dropping the transaction"""
    result = extractor.parse("Congratulations! Rs.100 cashback credited to your wallet")

    assert result.ok
    assert result.transaction.is_spam is True
    assert result.transaction.type == TransactionType.CREDIT
    assert result.transaction.merchant == "Transaction"


def test_debit_keywords_win_over_credit(extractor: TransactionTextExtractor):
    """Test type detection when both debit and credit words appear"""
    tx = extractor.parse("Rs.750 debited from a/c XX1111, refund will be credited in 5 days").transaction

    assert tx.type == TransactionType.DEBIT


def test_unknown_type(extractor: TransactionTextExtractor):
    """Test neither keyword set gives UNKNOWN"""
    tx = extractor.parse("Rs 10,000 transferred via IMPS. Ref No 998877").transaction

    assert tx.type == TransactionType.UNKNOWN
    assert tx.merchant == "Bank Transfer"
    assert tx.reference_id == "998877"
    assert tx.transaction_mode == TransactionMode.IMPS


def test_atm_merchant(extractor: TransactionTextExtractor):
    """Test ATM fallback when no payee token is present"""
    tx = extractor.parse("ATM cash withdrawn Rs 2,000 on A/c XX4321. Bal Rs 8,000").transaction

    assert tx.merchant == "ATM Withdrawal"
    assert tx.transaction_mode == TransactionMode.ATM
    assert tx.type == TransactionType.DEBIT
    assert tx.account_last4 == "4321"
    assert tx.balance_after == 8000.0


def test_pos_vendor_merchant(extractor: TransactionTextExtractor):
    """Test vendor name captured between 'POS' and the date"""
    tx = extractor.parse("Rs.1,499.00 spent on card XX9988 POS AMAZON RETAIL on 12-03-24").transaction

    assert tx.merchant == "AMAZON RETAIL"
    assert tx.transaction_mode == TransactionMode.POS
    assert tx.amount == 1499.0


def test_deposit_wording_falls_into_pos_branch(extractor: TransactionTextExtractor):
    """Test keyword containment: 'deposited' contains 'pos'"""
    tx = extractor.parse("Rs 5,000 deposited in your account").transaction

    assert tx.merchant == "POS Transaction"
    assert tx.type == TransactionType.CREDIT


def test_default_merchant(extractor: TransactionTextExtractor):
    """Test generic label when nothing in the chain matches"""
    tx = extractor.parse("Rs.250 debited on 01-02-24").transaction

    assert tx.merchant == "Transaction"
    assert tx.transaction_mode == TransactionMode.OTHER


def test_upi_handle_first_over_pos_keyword(extractor: TransactionTextExtractor):
    """Test payee token outranks the POS keyword when both are present"""
    tx = extractor.parse("Payment of Rs.300 to possible.store@ybl via UPI").transaction

    assert tx.merchant == "possible.store"


def test_account_last4_from_six_digits(extractor: TransactionTextExtractor):
    """Test only the last four digits of a longer account number are kept"""
    tx = extractor.parse("Rs.100 debited from A/c no. XXXX123456").transaction

    assert tx.account_last4 == "3456"


def test_sender_id_wins_over_body(extractor: TransactionTextExtractor):
    """Test bank from sender id takes priority over a bank named in the body"""
    assert extractor.identify_bank("Rs.500 sent to HDFC card", sender_id="SBIINB") == Bank.SBI


def test_body_bank_uses_table_order(extractor: TransactionTextExtractor):
    """Test first bank in table order wins when several appear in the body"""
    assert extractor.identify_bank("ICICI card bill paid from HDFC a/c") == Bank.HDFC
    assert extractor.identify_bank("Standard Chartered a/c debited") == Bank.STANDARD_CHARTERED
    assert extractor.identify_bank("Rs.10 debited") == Bank.UNKNOWN


def test_parse_for_bank(extractor: TransactionTextExtractor):
    """Test bank-specific parsing uses that bank's sender id"""
    tx = extractor.parse_for_bank("Rs.90 debited from a/c XX2222", Bank.AXIS).transaction

    assert tx.bank == Bank.AXIS


def test_parse_is_idempotent(extractor: TransactionTextExtractor):
    """Test the same input always yields an equal record"""
    first = extractor.parse(HDFC_UPI_DEBIT, "HDFCBK", RECEIVED_AT)
    second = extractor.parse(HDFC_UPI_DEBIT, "HDFCBK", RECEIVED_AT)

    assert first == second


def test_parse_batch_keeps_order(extractor: TransactionTextExtractor):
    """Test concurrent batch parsing lines results up with inputs"""
    messages = [
        SmsMessage(HDFC_UPI_DEBIT, "HDFCBK", RECEIVED_AT),
        SmsMessage("Congratulations! You won a cashback offer, apply now!"),
        SmsMessage("Rs.250 debited on 01-02-24", "KOTAKB"),
        SmsMessage(""),
    ]

    results = parse_batch(extractor, messages, max_workers=3)

    assert len(results) == 4
    assert results[0].transaction.merchant == "swiggy"
    assert results[1].failure == ParseFailure.NOT_TRANSACTIONAL
    assert results[2].transaction.bank == Bank.KOTAK
    assert results[3].failure == ParseFailure.EMPTY_MESSAGE
    assert results[0] == extractor.parse(HDFC_UPI_DEBIT, "HDFCBK", RECEIVED_AT)


def test_parse_batch_empty(extractor: TransactionTextExtractor):
    """Test empty batch"""
    assert parse_batch(extractor, []) == []
